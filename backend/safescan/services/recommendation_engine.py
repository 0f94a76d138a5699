"""
Alternative product recommendation engine.

This module finds strictly better alternatives to a scanned product within
a caller-supplied catalog, and summarizes a user's scan history into
personalized insights.

A candidate qualifies when it:
- Shares the scanned product's category
- Is not the scanned product itself
- Scores strictly higher for the same user profile

Confidence starts at 0.5 and moves with each qualitative advantage the
candidate has over the scanned product. Results are ranked by
0.7 x score improvement + 0.3 x confidence.
"""

import logging
from typing import List, Optional, Tuple

from safescan.models.product import Product, UserProfile
from safescan.models.recommendation import GoalProgress, PersonalizedInsights, Recommendation
from safescan.services.health_scorer import HealthScorer
from safescan.utils.constants import (
    BASE_CONFIDENCE,
    CONFIDENCE_INCREMENTS,
    CONFIDENCE_RANK_WEIGHT,
    DEFAULT_RECOMMENDATION_REASON,
    HEALTH_GOAL_INCREMENTS,
    IMPROVEMENT_RANK_WEIGHT,
    INSIGHT_THRESHOLDS,
    MAX_RECOMMENDATIONS,
    MIN_CONFIDENCE,
)
from safescan.utils.helpers import safe_divide, strip_tag_prefix

# Configure logging
logger = logging.getLogger(__name__)


def is_organic(product: Product) -> bool:
    """Whether a product carries an organic label tag (prefix ignored)."""
    return any(strip_tag_prefix(tag) == "organic" for tag in product.label_tags)


def meets_health_goal(product: Product, goal: str) -> bool:
    """Whether a product satisfies one health goal tag. Unknown goals never match."""
    if goal == "pfas_free":
        return not product.pfas_detected
    if goal == "organic":
        return is_organic(product)
    if goal == "plastic_free":
        return product.packaging != "plastic"
    return False


class RecommendationEngine:
    """
    Engine for finding and ranking healthier alternatives.

    The catalog is passed per call and treated as a read-only snapshot;
    the engine keeps no state between calls.

    Attributes:
        health_scorer: Scorer used to rescore catalog members
        max_results: Maximum number of recommendations returned
        min_confidence: Candidates below this confidence are dropped
        improvement_weight: Weight of score improvement in ranking
        confidence_weight: Weight of confidence in ranking
    """

    def __init__(
        self,
        health_scorer: HealthScorer,
        max_results: int = MAX_RECOMMENDATIONS,
        min_confidence: float = MIN_CONFIDENCE
    ):
        """
        Initialize recommendation engine.

        Args:
            health_scorer: Health scorer instance
            max_results: Top-N cutoff (default: 5)
            min_confidence: Minimum confidence to keep a candidate (default: 0.4)
        """
        self.health_scorer = health_scorer
        self.max_results = max_results
        self.min_confidence = min_confidence

        self.improvement_weight = IMPROVEMENT_RANK_WEIGHT
        self.confidence_weight = CONFIDENCE_RANK_WEIGHT

        logger.info(
            f"RecommendationEngine initialized with "
            f"max_results={self.max_results}, "
            f"min_confidence={self.min_confidence}, "
            f"improvement_weight={self.improvement_weight}, "
            f"confidence_weight={self.confidence_weight}"
        )

    def recommend_alternatives(
        self,
        product: Product,
        current_score: int,
        catalog: List[Product],
        user_profile: Optional[UserProfile] = None
    ) -> List[Recommendation]:
        """
        Find strictly better alternatives to a product.

        This is the main entry point for recommendations.

        Algorithm:
        1. Keep catalog members in the same category with a different id
        2. Rescore each candidate with the same user profile
        3. Drop candidates that do not beat current_score
        4. Analyze advantages and confidence, dropping low-confidence ones
        5. Rank by combined improvement + confidence
        6. Return top N

        Args:
            product: Scanned product
            current_score: Scanned product's health score
            catalog: Products to search, not modified
            user_profile: Consumer profile (default profile when None)

        Returns:
            List[Recommendation]: Ranked alternatives (best first).
                                  Empty list if nothing qualifies.

        Example:
            engine = RecommendationEngine(HealthScorer())
            recs = engine.recommend_alternatives(product, 60, catalog, profile)
        """
        profile = user_profile or UserProfile()

        logger.info(
            f"Finding alternatives for product_id={product.id} "
            f"(category={product.category}, score={current_score}) "
            f"in catalog of {len(catalog)}"
        )

        candidates = [
            c for c in catalog
            if c.category == product.category and c.id != product.id
        ]

        recommendations: List[Recommendation] = []
        for candidate in candidates:
            candidate_score = self.health_scorer.calculate_health_score(candidate, profile).score
            if candidate_score <= current_score:
                continue

            recommendation = self.analyze_candidate(
                candidate, product, profile, candidate_score, candidate_score - current_score
            )
            if recommendation is not None:
                recommendations.append(recommendation)

        ranked = sorted(recommendations, key=self.rank_key, reverse=True)
        top = ranked[:self.max_results]

        logger.info(
            f"Returning {len(top)} recommendation(s) out of "
            f"{len(candidates)} same-category candidate(s)"
        )
        return top

    def analyze_candidate(
        self,
        candidate: Product,
        current: Product,
        profile: UserProfile,
        candidate_score: int,
        score_improvement: int
    ) -> Optional[Recommendation]:
        """
        Work out why a candidate is better and how confident we are.

        The category is the first advantage found among PFAS-free,
        lab verified and fewer contaminants.

        Returns:
            Optional[Recommendation]: None when confidence is below the minimum
        """
        confidence = BASE_CONFIDENCE
        category = "better_alternative"
        reasons: List[str] = []

        if current.pfas_detected and not candidate.pfas_detected:
            reasons.append("PFAS-free")
            confidence += CONFIDENCE_INCREMENTS["pfas_free"]
            category = "pfas_free"

        if not current.lab_verified and candidate.lab_verified:
            reasons.append("Lab verified")
            confidence += CONFIDENCE_INCREMENTS["lab_verified"]
            if category == "better_alternative":
                category = "lab_verified"

        fewer = len(current.contaminants) - len(candidate.contaminants)
        if fewer > 0:
            reasons.append(f"{fewer} fewer contaminants")
            confidence += CONFIDENCE_INCREMENTS["fewer_contaminants"]
            if category == "better_alternative":
                category = "lower_contaminants"

        if candidate.packaging == "glass" and current.packaging != "glass":
            reasons.append("Glass packaging")
            confidence += CONFIDENCE_INCREMENTS["glass_packaging"]

        preferences = profile.preferences
        if candidate.packaging in preferences.preferred_packaging:
            confidence += CONFIDENCE_INCREMENTS["preferred_packaging"]

        if any(c.category in preferences.avoid_contaminants for c in candidate.contaminants):
            confidence += CONFIDENCE_INCREMENTS["avoided_contaminant"]

        for goal in profile.health_goals:
            increment = HEALTH_GOAL_INCREMENTS.get(goal)
            if increment is None or not meets_health_goal(candidate, goal):
                continue
            confidence += increment
            if goal == "organic":
                reasons.append("Organic")

        # Compare at fixed precision; increments are decimal fractions
        confidence = round(confidence, 4)
        if confidence < self.min_confidence:
            logger.debug(
                f"Dropping candidate {candidate.id}: confidence {confidence:.2f} "
                f"below {self.min_confidence}"
            )
            return None

        return Recommendation(
            product=candidate,
            score=candidate_score,
            score_improvement=score_improvement,
            confidence=min(confidence, 1.0),
            category=category,
            reason=", ".join(reasons) if reasons else DEFAULT_RECOMMENDATION_REASON,
        )

    def rank_key(self, recommendation: Recommendation) -> float:
        return (
            self.improvement_weight * recommendation.score_improvement
            + self.confidence_weight * recommendation.confidence
        )

    def get_personalized_insights(
        self,
        scan_history: List[Product],
        user_profile: Optional[UserProfile] = None
    ) -> PersonalizedInsights:
        """
        Summarize a scan history into habits worth changing.

        Args:
            scan_history: Products the user has scanned
            user_profile: Consumer profile; its health goals drive progress

        Returns:
            PersonalizedInsights: Average score, improvement opportunities
                                  and progress per health goal. All empty
                                  for an empty history.
        """
        if not scan_history:
            return PersonalizedInsights()

        profile = user_profile or UserProfile()
        total = len(scan_history)

        scores = [
            self.health_scorer.calculate_health_score(p, profile).score
            for p in scan_history
        ]
        average_score = int(round(safe_divide(sum(scores), total)))

        shares: List[Tuple[str, float, str]] = [
            (
                "pfas",
                safe_divide(sum(1 for p in scan_history if p.pfas_detected), total),
                "Consider PFAS-free alternatives",
            ),
            (
                "unverified",
                safe_divide(sum(1 for p in scan_history if not p.lab_verified), total),
                "Choose more lab-verified products",
            ),
            (
                "plastic",
                safe_divide(sum(1 for p in scan_history if p.packaging == "plastic"), total),
                "Switch to glass packaging when possible",
            ),
        ]
        opportunities = [
            message for key, share, message in shares
            if share > INSIGHT_THRESHOLDS[key]
        ]

        progress = [
            GoalProgress(
                goal=goal,
                progress=int(round(
                    100 * safe_divide(sum(1 for p in scan_history if meets_health_goal(p, goal)), total)
                )),
            )
            for goal in profile.health_goals
        ]

        logger.info(
            f"Insights over {total} scan(s): average={average_score}, "
            f"{len(opportunities)} opportunity(ies)"
        )

        return PersonalizedInsights(
            average_score=average_score,
            improvement_opportunities=opportunities,
            health_goal_progress=progress,
        )
