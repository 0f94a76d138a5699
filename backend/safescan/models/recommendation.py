"""
Pydantic models for alternative product recommendations and
personalized insights.
"""

from pydantic import BaseModel, Field
from typing import List, Literal

from safescan.models.product import Product


class Recommendation(BaseModel):
    """
    A strictly better alternative to the scanned product.

    Attributes:
        product: Alternative product
        score: Alternative's health score
        score_improvement: Alternative score minus current score (> 0)
        confidence: Certainty the alternative is better for this user (0-1)
        category: Primary advantage of the alternative
        reason: Comma-joined advantages
    """
    product: Product
    score: int = Field(..., ge=0, le=100)
    score_improvement: int = Field(..., gt=0, description="Points gained by switching")
    confidence: float = Field(..., ge=0.0, le=1.0)
    category: Literal["better_alternative", "pfas_free", "lab_verified", "lower_contaminants"]
    reason: str

    model_config = {"frozen": True}


class GoalProgress(BaseModel):
    """Share of scanned products that satisfy one health goal."""
    goal: str
    progress: int = Field(..., ge=0, le=100, description="Percent of scans")

    model_config = {"frozen": True}


class PersonalizedInsights(BaseModel):
    """
    Summary of a user's scan history.

    Attributes:
        average_score: Mean health score of scanned products
        improvement_opportunities: Suggested habit changes
        health_goal_progress: Progress per declared health goal
    """
    average_score: int = Field(0, ge=0, le=100)
    improvement_opportunities: List[str] = Field(default_factory=list)
    health_goal_progress: List[GoalProgress] = Field(default_factory=list)

    model_config = {"frozen": True}
