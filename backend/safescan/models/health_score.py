"""
Pydantic models for health scoring.

This module defines the score breakdown produced by the scoring engine and
the health score wrapper returned to callers.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List

from safescan.models.product import Product


class ScoreBreakdown(BaseModel):
    """
    Audit record of how a score was computed.

    Penalties are stored as positive magnitudes; adjustments and bonuses are
    signed point deltas. Reproducible from the same inputs.

    Attributes:
        base_score: Starting score (always 100)
        contaminant_penalty: Weighted contaminant penalty (0-60)
        allergen_penalty: Personal allergen penalty
        lab_verification_adjustment: -25 unverified / +5 verified
        water_source_adjustment: Water source bonus or penalty
        pfas_penalty: PFAS level penalty
        packaging_penalty: Packaging material penalty
        ph_adjustment: pH bonus or penalty
        toxic_ingredient_penalty: Toxic ingredient keyword penalty
        additive_penalty: E-number additive penalty
        label_bonus: Organic / natural / non-GMO bonus
        raw_score: Score after all adjustments, before sensitivity scaling
        sensitivity_multiplier: (6 - risk_sensitivity) / 3, applied to the net deviation
        final_score: Clamped, rounded final score
        explanation: One string per nonzero adjustment, in order applied
    """
    base_score: int = Field(100, description="Starting score")
    contaminant_penalty: float = Field(0.0, ge=0.0)
    allergen_penalty: float = Field(0.0, ge=0.0)
    lab_verification_adjustment: float = 0.0
    water_source_adjustment: float = 0.0
    pfas_penalty: float = Field(0.0, ge=0.0)
    packaging_penalty: float = Field(0.0, ge=0.0)
    ph_adjustment: float = 0.0
    toxic_ingredient_penalty: float = Field(0.0, ge=0.0)
    additive_penalty: float = Field(0.0, ge=0.0)
    label_bonus: float = Field(0.0, ge=0.0)
    raw_score: float = Field(..., description="Pre-scaling score")
    sensitivity_multiplier: float = Field(1.0, gt=0.0)
    final_score: int = Field(..., ge=0, le=100)
    explanation: List[str] = Field(default_factory=list)

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "base_score": 100,
                "contaminant_penalty": 0.0,
                "lab_verification_adjustment": -25.0,
                "water_source_adjustment": -15.0,
                "packaging_penalty": 5.0,
                "ph_adjustment": 5.0,
                "raw_score": 60.0,
                "sensitivity_multiplier": 1.0,
                "final_score": 60,
                "explanation": [
                    "Not lab verified: -25 points",
                    "Municipal water source: -15 points",
                    "Plastic packaging: -5 points",
                    "Optimal pH (7.2): +5 points"
                ]
            }
        }
    }


class HealthScore(BaseModel):
    """
    Health score model.

    Attributes:
        score: Final score (0-100)
        rating: Categorical label (Excellent/Good/Moderate Risk/High Risk)
        grade: Letter grade (A-F)
        breakdown: Detailed score breakdown
    """
    score: int = Field(..., ge=0, le=100, description="Overall health score (0-100)")
    rating: str = Field(..., description="Health rating category")
    grade: str = Field(..., description="Letter grade")
    breakdown: ScoreBreakdown = Field(..., description="Detailed score breakdown")

    @field_validator('rating')
    @classmethod
    def validate_rating(cls, v: str) -> str:
        """Ensure rating is one of the valid categories."""
        valid_ratings = ["Excellent", "Good", "Moderate Risk", "High Risk"]
        if v not in valid_ratings:
            raise ValueError(f'Rating must be one of: {", ".join(valid_ratings)}')
        return v

    @field_validator('grade')
    @classmethod
    def validate_grade(cls, v: str) -> str:
        if v not in ("A", "B", "C", "D", "F"):
            raise ValueError('Grade must be one of: A, B, C, D, F')
        return v

    @model_validator(mode='after')
    def validate_score_consistency(self):
        """Ensure score, rating and breakdown agree."""
        score = self.score
        rating = self.rating

        if score >= 80 and rating != "Excellent":
            raise ValueError(f'Score {score} should have rating "Excellent", got "{rating}"')
        elif 60 <= score < 80 and rating != "Good":
            raise ValueError(f'Score {score} should have rating "Good", got "{rating}"')
        elif 40 <= score < 60 and rating != "Moderate Risk":
            raise ValueError(f'Score {score} should have rating "Moderate Risk", got "{rating}"')
        elif score < 40 and rating != "High Risk":
            raise ValueError(f'Score {score} should have rating "High Risk", got "{rating}"')

        if self.breakdown.final_score != score:
            raise ValueError(
                f'Breakdown final score {self.breakdown.final_score} does not match {score}'
            )

        return self

    model_config = {"frozen": True}


class ScoredProduct(BaseModel):
    """A catalog product paired with its computed health score."""
    product: Product
    score: int = Field(..., ge=0, le=100)
    rating: str

    model_config = {"frozen": True}
