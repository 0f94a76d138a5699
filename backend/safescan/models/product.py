"""
Pydantic models for product and user profile data.

This module defines the input records consumed by the scoring services:
the scanned or cataloged Product with its measured Contaminants, and the
consumer's UserProfile. All models are frozen value objects; field
constraints reject malformed input at construction time.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Literal, Optional

from safescan.utils.constants import WATER_CATEGORIES


ProductCategory = Literal["bottled_water", "tap_water", "food", "beverage", "baby_food"]
Packaging = Literal["glass", "plastic", "aluminum", "none"]
WaterSource = Literal["municipal", "spring", "aquifer", "filtered"]
ContaminantCategory = Literal[
    "pfas", "heavy_metals", "microbiological", "chemical", "microplastics",
    "pesticides", "radiological", "vocs", "disinfectants", "herbicides",
    "haloacetic_acids", "trihalomethanes", "fluoride",
]
ContaminantUnit = Literal["ppb", "ppm", "ppt", "mg/L", "pCi"]


class Contaminant(BaseModel):
    """
    One measured substance in a product.

    Severity is a fixed 1-5 hazard rating independent of the measured
    concentration; scoring uses both together.

    Attributes:
        name: Substance name (e.g., "Lead")
        category: Contaminant category used for weighting
        severity: Hazard rating, 1 (minimal) to 5 (critical)
        concentration: Measured concentration in `unit`
        unit: Concentration unit
        max_allowed: Regulatory ceiling in the same unit, if one exists
        health_risk: Free-text description of the health effect
    """
    name: str = Field(..., min_length=1, description="Substance name")
    category: ContaminantCategory = Field(..., description="Contaminant category")
    severity: int = Field(..., ge=1, le=5, description="Hazard rating (1-5)")
    concentration: float = Field(..., ge=0.0, description="Measured concentration")
    unit: ContaminantUnit = Field(..., description="Concentration unit")
    max_allowed: Optional[float] = Field(
        None,
        ge=0.0,
        description="Regulatory ceiling in the same unit"
    )
    health_risk: str = Field("", description="Health effect description")

    @property
    def exceeds_limit(self) -> bool:
        """True when a regulatory ceiling exists and the measurement is above it."""
        return self.max_allowed is not None and self.concentration > self.max_allowed

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "name": "Lead",
                "category": "heavy_metals",
                "severity": 4,
                "concentration": 20.0,
                "unit": "ppb",
                "max_allowed": 15.0,
                "health_risk": "Neurological damage, developmental issues"
            }
        }
    }


class Product(BaseModel):
    """
    A scanned or cataloged consumer product.

    Attributes:
        id: Unique identifier (barcode or catalog id)
        name: Display name
        brand: Brand name
        category: Product category; water categories enable pH and source rules
        contaminants: Measured contaminants, in report order
        pfas_detected: Whether PFAS were detected
        pfas_level: Total PFAS concentration in ppt (only when detected)
        pfas_compounds: Names of the PFAS compounds listed in the lab report
        packaging: Packaging material
        source: Water source (water products)
        ph: Measured pH
        lab_verified: Whether results come from an independent lab
        ingredients: Free-text ingredient names, label order
        allergen_tags: Declared allergen tags (e.g., "en:milk")
        additive_tags: Additive tags (e.g., "en:e150d")
        label_tags: Label tags (e.g., "en:organic")
    """
    id: str = Field(..., min_length=1, max_length=100, description="Product identifier")
    name: Optional[str] = Field(None, description="Product name")
    brand: Optional[str] = Field(None, description="Brand name")
    category: ProductCategory = Field(..., description="Product category")
    contaminants: List[Contaminant] = Field(default_factory=list)
    pfas_detected: bool = Field(False, description="PFAS detected")
    pfas_level: Optional[float] = Field(
        None,
        ge=0.0,
        description="Total PFAS concentration (ppt)"
    )
    pfas_compounds: List[str] = Field(default_factory=list)
    packaging: Packaging = Field("none", description="Packaging material")
    source: Optional[WaterSource] = Field(None, description="Water source")
    ph: Optional[float] = Field(None, ge=0.0, le=14.0, description="pH level")
    lab_verified: bool = Field(False, description="Independently lab verified")
    ingredients: List[str] = Field(default_factory=list)
    allergen_tags: List[str] = Field(default_factory=list)
    additive_tags: List[str] = Field(default_factory=list)
    label_tags: List[str] = Field(default_factory=list)

    @field_validator('ingredients')
    @classmethod
    def strip_ingredients(cls, v: List[str]) -> List[str]:
        """Trim ingredient names and drop blank entries."""
        return [ing.strip() for ing in v if ing and ing.strip()]

    @model_validator(mode='after')
    def validate_pfas_level(self):
        """A PFAS level is only meaningful when PFAS were detected."""
        if self.pfas_level is not None and not self.pfas_detected:
            raise ValueError('pfas_level requires pfas_detected to be true')
        return self

    @property
    def is_water(self) -> bool:
        return self.category in WATER_CATEGORIES

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "id": "632565000012",
                "name": "Natural Artesian Water",
                "brand": "Fiji",
                "category": "bottled_water",
                "contaminants": [],
                "pfas_detected": False,
                "packaging": "plastic",
                "source": "aquifer",
                "ph": 7.7,
                "lab_verified": True,
                "ingredients": ["Natural artesian water", "Electrolytes"],
                "label_tags": ["en:natural"]
            }
        }
    }


class UserPreferences(BaseModel):
    """
    Optional tuning knobs from the user's settings.

    Attributes:
        max_pfas: Personal PFAS tolerance in ppt
        preferred_packaging: Packaging materials the user prefers
        avoid_contaminants: Contaminant categories the user wants to avoid
    """
    max_pfas: Optional[float] = Field(None, ge=0.0, description="PFAS tolerance (ppt)")
    preferred_packaging: List[Packaging] = Field(default_factory=list)
    avoid_contaminants: List[ContaminantCategory] = Field(default_factory=list)

    model_config = {"frozen": True}


class UserProfile(BaseModel):
    """
    Consumer risk profile. Supplied per request and never mutated.

    Attributes:
        selected_allergens: Allergen identifiers (e.g., "dairy", "gluten")
        risk_sensitivity: 1 (most conservative) to 5 (most permissive)
        health_goals: Goal tags (e.g., "pfas_free", "organic")
        preferences: Optional tuning knobs
    """
    selected_allergens: List[str] = Field(default_factory=list)
    risk_sensitivity: int = Field(3, ge=1, le=5, description="Risk sensitivity (1-5)")
    health_goals: List[str] = Field(default_factory=list)
    preferences: UserPreferences = Field(default_factory=UserPreferences)

    @field_validator('selected_allergens', 'health_goals')
    @classmethod
    def normalize_identifiers(cls, v: List[str]) -> List[str]:
        """Lower-case identifiers and drop blanks, keeping first occurrence order."""
        seen = []
        for item in v:
            key = item.strip().lower()
            if key and key not in seen:
                seen.append(key)
        return seen

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "selected_allergens": ["dairy"],
                "risk_sensitivity": 3,
                "health_goals": ["pfas_free"],
                "preferences": {
                    "max_pfas": 10.0,
                    "preferred_packaging": ["glass"],
                    "avoid_contaminants": ["microplastics"]
                }
            }
        }
    }
