"""
Pydantic models for ingredient classification.

Each ingredient receives exactly one tag from a precedence-ordered
enumeration; earlier members win over later ones.
"""

from enum import Enum
from pydantic import BaseModel, Field
from typing import Dict, Literal, Optional


class IngredientTag(str, Enum):
    """Ingredient risk tags in strict precedence order."""
    ALLERGEN = "ALLERGEN"
    CONTAMINANT = "CONTAMINANT"
    PFAS = "PFAS"
    TOXIN = "TOXIN"
    ADDITIVE = "ADDITIVE"
    ARTIFICIAL = "ARTIFICIAL"
    BENEFICIAL = "BENEFICIAL"
    SAFE = "SAFE"


RiskLevel = Literal["high", "medium", "low", "none"]


class ClassifiedIngredient(BaseModel):
    """
    One ingredient with its risk tag.

    Attributes:
        name: Original ingredient text (trimmed)
        tag: Single risk tag
        risk: Risk level of the tag
        description: Short human-readable description
        matched: Keyword, contaminant or compound that triggered the tag
    """
    name: str
    tag: IngredientTag
    risk: RiskLevel
    description: str
    matched: Optional[str] = Field(None, description="Trigger for the tag")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "name": "Organic whole milk",
                "tag": "ALLERGEN",
                "risk": "high",
                "description": "Contains dairy allergen in your profile",
                "matched": "milk"
            }
        }
    }


class ClassificationSummary(BaseModel):
    """Tag counts over a classified ingredient list."""
    total: int = 0
    counts: Dict[str, int] = Field(default_factory=dict)

    model_config = {"frozen": True}
