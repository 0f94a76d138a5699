"""
Rule-based product health scoring engine.

This module computes a 0-100 safety/health score for a product from its
measured contaminants, composition and packaging, personalised by an
optional user profile. There is no trained model: every rule is an
explicit, fixed adjustment defined in `safescan.utils.constants`.

The scoring system is:
- Transparent: All rules are explicitly defined
- Explainable: The breakdown lists every nonzero adjustment in order
- Deterministic: Identical inputs always yield identical output
- Pure: No I/O, no shared mutable state

Algorithm (each step is computed from the unmodified input, then summed):
1. Contaminant penalty (0 to -60)
2. Personal allergen penalty (-25 per matched allergen)
3. Lab verification (-25 / +5)
4. Water source (water products only)
5. PFAS penalty (step function of ppt level)
6. Packaging penalty
7. pH adjustment (water products only)
8. Toxic ingredient and E-number additive penalties
9. Organic / natural / non-GMO label bonuses
10. Risk sensitivity scaling of the net deviation from 100
"""

import logging
from typing import Iterable, List, Optional, Tuple

from safescan.models.health_score import HealthScore, ScoreBreakdown, ScoredProduct
from safescan.models.product import Product, UserProfile
from safescan.utils.constants import (
    BASE_SCORE,
    CONTAMINANT_EXCEEDS_LIMIT_PENALTY,
    CONTAMINANT_ITEM_CAP,
    CONTAMINANT_RATIO_CAP,
    CONTAMINANT_SCALE,
    CONTAMINANT_TOTAL_CAP,
    ALLERGEN_PENALTY,
    DEFAULT_RISK_SENSITIVITY,
    E_NUMBER_PENALTY,
    GRADE_THRESHOLDS,
    LAB_UNVERIFIED_PENALTY,
    LAB_VERIFIED_BONUS,
    LABEL_BONUSES,
    PACKAGING_PENALTIES,
    PFAS_COMPOUND_THRESHOLD,
    PFAS_LEVEL_PENALTIES,
    PFAS_MULTI_COMPOUND_PENALTY,
    PFAS_PENALTY_CAP,
    PFAS_TRACE_PENALTY,
    PFAS_USER_LIMIT_PENALTY,
    PH_ACCEPTABLE_RANGE,
    PH_OPTIMAL_BONUS,
    PH_OPTIMAL_RANGE,
    PH_OUT_OF_RANGE_PENALTY,
    RATING_THRESHOLDS,
    RISK_SENSITIVITY_MAX,
    RISK_SENSITIVITY_MIDPOINT,
    RISK_SENSITIVITY_MIN,
    SCORE_CEILING,
    SCORE_FLOOR,
    TOXIC_INGREDIENT_PENALTY,
    TOXIC_INGREDIENTS,
    WATER_SOURCE_ADJUSTMENTS,
)
from safescan.utils.helpers import (
    canonical_pfas_name,
    clamp,
    contains_e_number,
    find_keywords,
    get_allergen_keywords,
    get_contaminant_weight,
    normalize_text,
    safe_divide,
    strip_tag_prefix,
)

# Configure logging
logger = logging.getLogger(__name__)

# (signed point delta, explanation or None)
Adjustment = Tuple[float, Optional[str]]


def _format_points(points: float) -> str:
    """Render a signed point delta, e.g. "-25 points" or "-12.3 points"."""
    sign = "+" if points > 0 else "-"
    magnitude = abs(points)
    if float(magnitude).is_integer():
        return f"{sign}{magnitude:.0f} points"
    return f"{sign}{magnitude:.1f} points"


class HealthScorer:
    """
    Rule-based health scoring engine for consumer products.

    Stateless apart from its fixed rule constants; a single instance can be
    shared across threads and requests.

    Attributes:
        base_score: Starting score before adjustments (100)
        floor: Lowest possible final score
        ceiling: Highest possible final score
    """

    def __init__(self, floor: int = SCORE_FLOOR, ceiling: int = SCORE_CEILING):
        """
        Initialize the health scorer.

        Args:
            floor: Lowest final score (0, or 1 to reserve 0 for "unscorable")
            ceiling: Highest final score
        """
        self.base_score = BASE_SCORE
        self.floor = floor
        self.ceiling = ceiling

        logger.info(
            f"HealthScorer initialized with base={self.base_score}, "
            f"range=[{self.floor}, {self.ceiling}]"
        )

    def calculate_health_score(
        self,
        product: Product,
        user_profile: Optional[UserProfile] = None
    ) -> HealthScore:
        """
        Calculate the health score of a product for a user.

        This is the main entry point for scoring. Every adjustment is
        computed independently from the input, the adjustments are summed,
        the net deviation from 100 is scaled by the user's risk sensitivity,
        and the result is rounded and clamped.

        Args:
            product: Product to score
            user_profile: Optional consumer profile (allergens, sensitivity,
                PFAS tolerance). Defaults to a neutral profile.

        Returns:
            HealthScore: Final score, rating, grade and full breakdown

        Example:
            scorer = HealthScorer()
            result = scorer.calculate_health_score(product, profile)
            print(result.score, result.breakdown.explanation)
        """
        logger.info(f"Calculating health score for product {product.id}")
        profile = user_profile or UserProfile()

        steps = [
            ("contaminant", self.score_contaminants(product)),
            ("allergen", self.score_allergens(product, profile)),
            ("lab_verification", self.score_lab_verification(product)),
            ("water_source", self.score_water_source(product)),
            ("pfas", self.score_pfas(product, profile)),
            ("packaging", self.score_packaging(product)),
            ("ph", self.score_ph(product)),
            ("toxic_ingredient", self.score_toxic_ingredients(product)),
            ("additive", self.score_additives(product)),
            ("label", self.score_labels(product)),
        ]

        explanation: List[str] = []
        deltas = {}
        for name, (points, message) in steps:
            deltas[name] = points
            if points != 0 and message:
                explanation.append(message)
            logger.debug(f"Step {name}: {points:+.2f}")

        raw_score = self.base_score + sum(deltas.values())

        sensitivity = profile.risk_sensitivity or DEFAULT_RISK_SENSITIVITY
        scaled_score, multiplier, message = self.apply_sensitivity(raw_score, sensitivity)
        if message:
            explanation.append(message)

        final_score = int(round(clamp(scaled_score, self.floor, self.ceiling)))
        rating = self.assign_rating(final_score)
        grade = self.assign_grade(final_score)

        breakdown = ScoreBreakdown(
            base_score=self.base_score,
            contaminant_penalty=round(-deltas["contaminant"], 2),
            allergen_penalty=-deltas["allergen"],
            lab_verification_adjustment=deltas["lab_verification"],
            water_source_adjustment=deltas["water_source"],
            pfas_penalty=-deltas["pfas"],
            packaging_penalty=-deltas["packaging"],
            ph_adjustment=deltas["ph"],
            toxic_ingredient_penalty=-deltas["toxic_ingredient"],
            additive_penalty=-deltas["additive"],
            label_bonus=deltas["label"],
            raw_score=round(raw_score, 2),
            sensitivity_multiplier=round(multiplier, 4),
            final_score=final_score,
            explanation=explanation,
        )

        logger.info(f"Final health score for {product.id}: {final_score} ({rating})")

        return HealthScore(
            score=final_score,
            rating=rating,
            grade=grade,
            breakdown=breakdown
        )

    def score_contaminants(self, product: Product) -> Adjustment:
        """
        Penalize measured contaminants by weight, severity and concentration.

        Per contaminant:
            min(weight% * severity * ratio * 60, 15)
            + 10 if the concentration exceeds its regulatory limit
        where ratio = concentration / max_allowed (capped at 2) when a limit
        is known, else 1. The sum is capped at 60.

        Args:
            product: Product with its contaminant list

        Returns:
            Adjustment: (negative penalty, explanation)
        """
        total = 0.0
        for contaminant in product.contaminants:
            weight = get_contaminant_weight(contaminant.category)
            ratio = 1.0
            if contaminant.max_allowed:
                ratio = min(
                    safe_divide(contaminant.concentration, contaminant.max_allowed, 1.0),
                    CONTAMINANT_RATIO_CAP
                )

            penalty = min(
                (weight / 100) * contaminant.severity * ratio * CONTAMINANT_SCALE,
                CONTAMINANT_ITEM_CAP
            )
            if contaminant.exceeds_limit:
                penalty += CONTAMINANT_EXCEEDS_LIMIT_PENALTY

            logger.debug(
                f"Contaminant {contaminant.name} ({contaminant.category}): "
                f"weight={weight}, severity={contaminant.severity}, "
                f"ratio={ratio:.2f}, penalty={penalty:.2f}"
            )
            total += penalty

        total = min(total, CONTAMINANT_TOTAL_CAP)
        if total <= 0:
            return 0.0, None
        return -total, f"Contaminants detected: {_format_points(-total)}"

    def score_allergens(self, product: Product, profile: UserProfile) -> Adjustment:
        """
        Penalize each user-selected allergen found in the product.

        One fixed penalty per matched allergen, however many ingredients
        contain it. Ingredient text and declared allergen tags are searched.
        """
        if not profile.selected_allergens:
            return 0.0, None

        texts = [normalize_text(ing) for ing in product.ingredients]
        texts.extend(normalize_text(tag) for tag in product.allergen_tags)

        matched = []
        for allergen in profile.selected_allergens:
            keywords = get_allergen_keywords(allergen)
            if any(find_keywords(text, keywords) for text in texts):
                matched.append(allergen)

        if not matched:
            return 0.0, None

        points = -float(ALLERGEN_PENALTY * len(matched))
        return points, (
            f"Contains allergens from your profile ({', '.join(matched)}): "
            f"{_format_points(points)}"
        )

    def score_lab_verification(self, product: Product) -> Adjustment:
        """Penalize unverified products, reward independently verified ones."""
        if product.lab_verified:
            points = float(LAB_VERIFIED_BONUS)
            return points, f"Lab verified: {_format_points(points)}"
        points = -float(LAB_UNVERIFIED_PENALTY)
        return points, f"Not lab verified: {_format_points(points)}"

    def score_water_source(self, product: Product) -> Adjustment:
        """Adjust water products by source; other categories are unaffected."""
        if not product.is_water or not product.source:
            return 0.0, None

        points = float(WATER_SOURCE_ADJUSTMENTS.get(product.source, 0))
        if points == 0:
            return 0.0, None

        labels = {
            "municipal": "Municipal water source",
            "spring": "Natural water source",
            "aquifer": "Natural water source",
            "filtered": "Filtered water",
        }
        return points, f"{labels[product.source]}: {_format_points(points)}"

    def score_pfas(self, product: Product, profile: UserProfile) -> Adjustment:
        """
        Penalize detected PFAS by concentration.

        Step function of the total ppt level, plus a fixed increment when
        more than three distinct compounds are listed (capped at 50), plus a
        further increment when the level exceeds the user's tolerance.
        Skipped when PFAS were not detected or no level was measured.
        """
        if not product.pfas_detected or product.pfas_level is None:
            return 0.0, None

        level = product.pfas_level
        penalty = PFAS_TRACE_PENALTY
        for threshold, step_penalty in PFAS_LEVEL_PENALTIES:
            if level > threshold:
                penalty = step_penalty
                break

        names = list(product.pfas_compounds)
        names.extend(c.name for c in product.contaminants if c.category == "pfas")
        compounds = {canonical_pfas_name(name) for name in names if name.strip()}
        if len(compounds) > PFAS_COMPOUND_THRESHOLD:
            penalty += PFAS_MULTI_COMPOUND_PENALTY
            logger.debug(f"Multiple PFAS compounds listed: {sorted(compounds)}")

        penalty = min(penalty, PFAS_PENALTY_CAP)

        max_pfas = profile.preferences.max_pfas
        if max_pfas is not None and level > max_pfas:
            penalty += PFAS_USER_LIMIT_PENALTY
            logger.debug(f"PFAS level {level} ppt exceeds user tolerance {max_pfas} ppt")

        points = -float(penalty)
        return points, f"PFAS detected ({level:g} ppt): {_format_points(points)}"

    def score_packaging(self, product: Product) -> Adjustment:
        """Penalize plastic and aluminum packaging."""
        penalty = PACKAGING_PENALTIES.get(product.packaging, 0)
        if penalty == 0:
            return 0.0, None
        points = -float(penalty)
        return points, f"{product.packaging.capitalize()} packaging: {_format_points(points)}"

    def score_ph(self, product: Product) -> Adjustment:
        """
        Adjust water products by pH.

        Penalty outside the acceptable range, bonus inside the optimal band,
        nothing in between. Skipped for non-water products or missing pH.
        """
        if not product.is_water or product.ph is None:
            return 0.0, None

        ph = product.ph
        low, high = PH_ACCEPTABLE_RANGE
        optimal_low, optimal_high = PH_OPTIMAL_RANGE

        if ph < low or ph > high:
            points = -float(PH_OUT_OF_RANGE_PENALTY)
            return points, f"pH outside safe range ({ph:g}): {_format_points(points)}"
        if optimal_low <= ph <= optimal_high:
            points = float(PH_OPTIMAL_BONUS)
            return points, f"Optimal pH ({ph:g}): {_format_points(points)}"
        return 0.0, None

    def score_toxic_ingredients(self, product: Product) -> Adjustment:
        """Penalize each toxic lexicon keyword found in the ingredient text."""
        if not product.ingredients:
            return 0.0, None

        ingredients_text = " ".join(product.ingredients)
        found = find_keywords(ingredients_text, TOXIC_INGREDIENTS)
        if not found:
            return 0.0, None

        points = -float(TOXIC_INGREDIENT_PENALTY * len(found))
        return points, f"Toxic ingredients ({', '.join(found)}): {_format_points(points)}"

    def score_additives(self, product: Product) -> Adjustment:
        """Penalize each additive tag carrying an E-number code."""
        e_numbers = [tag for tag in product.additive_tags if contains_e_number(tag)]
        if not e_numbers:
            return 0.0, None

        points = -float(E_NUMBER_PENALTY * len(e_numbers))
        return points, f"{len(e_numbers)} E-number additive(s): {_format_points(points)}"

    def score_labels(self, product: Product) -> Adjustment:
        """Reward organic, natural and non-GMO labels."""
        labels = {strip_tag_prefix(tag) for tag in product.label_tags}
        matched = [label for label in LABEL_BONUSES if label in labels]
        if not matched:
            return 0.0, None

        points = float(sum(LABEL_BONUSES[label] for label in matched))
        return points, f"Certified labels ({', '.join(matched)}): {_format_points(points)}"

    def apply_sensitivity(
        self,
        raw_score: float,
        risk_sensitivity: int
    ) -> Tuple[float, float, Optional[str]]:
        """
        Scale the net deviation from the base score by risk sensitivity.

        The dial runs from 1 (most conservative) to 5 (most permissive), so
        the multiplier mirrors it around the midpoint: (6 - sensitivity) / 3.
        Sensitivity 1 amplifies the net deviation by 5/3, 3 leaves the score
        unchanged, 5 dampens it to 1/3. Bonuses scale the same way.

        Args:
            raw_score: Score after all adjustments
            risk_sensitivity: User sensitivity 1-5

        Returns:
            Tuple: (scaled score, multiplier, explanation or None)
        """
        effective = RISK_SENSITIVITY_MIN + RISK_SENSITIVITY_MAX - risk_sensitivity
        multiplier = effective / RISK_SENSITIVITY_MIDPOINT
        deviation = self.base_score - raw_score
        scaled = self.base_score - deviation * multiplier

        if multiplier == 1 or deviation == 0:
            return scaled, multiplier, None

        message = (
            f"Risk sensitivity {risk_sensitivity}/5: "
            f"net adjustment scaled x{multiplier:.2f}"
        )
        return scaled, multiplier, message

    def assign_rating(self, score: float) -> str:
        """
        Convert numeric score to a categorical label.

        Rating thresholds:
        - 80-100: "Excellent"
        - 60-79: "Good"
        - 40-59: "Moderate Risk"
        - 0-39: "High Risk"
        """
        if score >= RATING_THRESHOLDS["Excellent"]:
            return "Excellent"
        elif score >= RATING_THRESHOLDS["Good"]:
            return "Good"
        elif score >= RATING_THRESHOLDS["Moderate Risk"]:
            return "Moderate Risk"
        else:
            return "High Risk"

    def assign_grade(self, score: float) -> str:
        """Convert numeric score to a letter grade (A-F)."""
        for grade, threshold in GRADE_THRESHOLDS.items():
            if score >= threshold:
                return grade
        return "F"

    def score_products(
        self,
        products: Iterable[Product],
        user_profile: Optional[UserProfile] = None
    ) -> List[ScoredProduct]:
        """
        Score and rank a list of products, best first.

        Ties keep their input order.
        """
        scored = []
        for product in products:
            result = self.calculate_health_score(product, user_profile)
            scored.append(
                ScoredProduct(product=product, score=result.score, rating=result.rating)
            )
        scored.sort(key=lambda item: item.score, reverse=True)
        return scored

    def get_risk_advice(
        self,
        score: float,
        allergens_detected: int = 0,
        toxins_detected: int = 0
    ) -> str:
        """
        One-line advice banner for a scored product.

        Args:
            score: Final health score
            allergens_detected: Number of ingredients tagged ALLERGEN
            toxins_detected: Number of ingredients tagged TOXIN or PFAS

        Returns:
            str: Advice text
        """
        if allergens_detected > 0:
            return "AVOID: Contains allergens from your profile"
        if score < 40:
            return "AVOID: High health risk detected"
        if score < 60 or toxins_detected > 0:
            return "CAUTION: Consider healthier alternatives"
        if score < 80:
            return "OKAY: Generally safe but could be better"
        return "EXCELLENT: Great healthy choice!"
