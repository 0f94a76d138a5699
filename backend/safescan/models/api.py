"""
Pydantic models for API requests and responses.

Request models carry the Product / UserProfile records defined in
models/product.py; response models wrap the service outputs.
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from safescan.models.classification import ClassificationSummary, ClassifiedIngredient
from safescan.models.health_score import HealthScore, ScoredProduct
from safescan.models.product import Contaminant, Product, UserProfile
from safescan.models.recommendation import Recommendation
from safescan.models.risk import RiskVerdict


class ScoreRequest(BaseModel):
    """
    Request model for the /score endpoint.

    Attributes:
        product: Product to score
        user_profile: Optional consumer profile
    """
    product: Product = Field(..., description="Product to score")
    user_profile: Optional[UserProfile] = Field(None, description="Consumer profile")


class ClassifyRequest(BaseModel):
    """
    Request model for the /classify endpoint.

    Attributes:
        ingredients: Ingredient strings in label order
        contaminants: Contaminants measured in the product
        selected_allergens: User-selected allergen identifiers
    """
    ingredients: List[str] = Field(default_factory=list)
    contaminants: List[Contaminant] = Field(default_factory=list)
    selected_allergens: List[str] = Field(default_factory=list)

    @field_validator('ingredients')
    @classmethod
    def strip_ingredients(cls, v: List[str]) -> List[str]:
        """Trim ingredient names and drop blank entries."""
        return [ing.strip() for ing in v if ing and ing.strip()]

    @field_validator('selected_allergens')
    @classmethod
    def normalize_allergens(cls, v: List[str]) -> List[str]:
        return [a.strip().lower() for a in v if a and a.strip()]

    model_config = {
        "json_schema_extra": {
            "example": {
                "ingredients": ["Organic whole milk", "Vitamin D3", "E330"],
                "contaminants": [],
                "selected_allergens": ["dairy"]
            }
        }
    }


class ClassifyResponse(BaseModel):
    """Classified ingredients with per-tag counts."""
    ingredients: List[ClassifiedIngredient]
    summary: ClassificationSummary


class AssessRequest(BaseModel):
    """Request model for the /assess endpoint."""
    contaminants: List[Contaminant] = Field(default_factory=list)


class RecommendRequest(BaseModel):
    """
    Request model for the /recommend endpoint.

    Attributes:
        product: Scanned product
        current_score: Scanned product's score; computed when omitted
        catalog: Products to search for alternatives
        user_profile: Optional consumer profile
    """
    product: Product
    current_score: Optional[int] = Field(None, ge=0, le=100)
    catalog: List[Product] = Field(default_factory=list)
    user_profile: Optional[UserProfile] = None


class RecommendResponse(BaseModel):
    """Ranked alternatives for a scanned product."""
    product_id: str
    current_score: int = Field(..., ge=0, le=100)
    recommendations: List[Recommendation] = Field(default_factory=list)


class CompareRequest(BaseModel):
    """Request model for the /compare endpoint."""
    products: List[Product] = Field(..., min_length=1)
    user_profile: Optional[UserProfile] = None


class CompareResponse(BaseModel):
    """Products ranked by score, best first."""
    ranked: List[ScoredProduct]


class InsightsRequest(BaseModel):
    """Request model for the /insights endpoint."""
    scan_history: List[Product] = Field(default_factory=list)
    user_profile: Optional[UserProfile] = None


class AnalyzeRequest(BaseModel):
    """
    Request model for the /analyze endpoint.

    Runs scoring, classification, risk assessment and (when a catalog is
    supplied) recommendation on one product.
    """
    product: Product
    user_profile: Optional[UserProfile] = None
    catalog: List[Product] = Field(default_factory=list)


class AnalyzeResponse(BaseModel):
    """
    Full analysis of one product.

    Attributes:
        product: Analyzed product
        health_score: Score, rating, grade and breakdown
        ingredients: Classified ingredients
        summary: Tag counts over the classified ingredients
        risk: Contaminant risk verdict
        recommendations: Ranked alternatives (empty without a catalog)
        advice: One-line advice banner
    """
    product: Product
    health_score: HealthScore
    ingredients: List[ClassifiedIngredient] = Field(default_factory=list)
    summary: ClassificationSummary
    risk: RiskVerdict
    recommendations: List[Recommendation] = Field(default_factory=list)
    advice: str
