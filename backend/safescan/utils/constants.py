"""
Centralized constants and configuration data.

This module contains all hardcoded lexicons, weights, thresholds and fixed
messages used by the scoring, classification, risk and recommendation
services. Centralizing these values makes them easy to modify and audit.

Categories:
- Contaminant weight table
- Allergen keyword map
- PFAS compound registry
- Toxic / artificial / beneficial ingredient lexicons
- Scoring penalties and bonuses
- Rating and grade thresholds
- Risk verdict messages
- Recommendation confidence increments
"""

import re
from typing import Dict, List, Tuple

# ==============================================================================
# PRODUCT CATEGORIES
# ==============================================================================

# pH and water-source rules only apply to these
WATER_CATEGORIES: Tuple[str, ...] = ("bottled_water", "tap_water")


# ==============================================================================
# CONTAMINANT WEIGHT TABLE
# ==============================================================================

# Relative importance (percent) of each contaminant category
CONTAMINANT_WEIGHTS: Dict[str, float] = {
    # High priority
    "pfas": 9.68,
    "heavy_metals": 9.68,
    "microbiological": 9.68,
    "radiological": 9.68,
    "vocs": 9.68,
    "disinfectants": 9.68,

    # Medium priority
    "microplastics": 6.45,
    "pesticides": 6.45,
    "herbicides": 6.45,
    "haloacetic_acids": 4.84,
    "trihalomethanes": 4.84,
    "fluoride": 4.03,
}

# Weight for categories missing from the table (e.g. "chemical")
DEFAULT_CONTAMINANT_WEIGHT: float = 1.0


# ==============================================================================
# ALLERGEN DATABASE
# ==============================================================================

ALLERGEN_KEYWORDS: Dict[str, List[str]] = {
    "dairy": [
        "milk", "lactose", "casein", "whey", "butter", "cheese", "cream",
        "yogurt"
    ],
    "gluten": [
        "wheat", "barley", "rye", "gluten", "malt", "flour"
    ],
    "peanuts": [
        "peanut", "groundnut", "arachis"
    ],
    "eggs": [
        "egg", "albumin", "lecithin", "mayonnaise"
    ],
    "fish": [
        "fish", "salmon", "tuna", "cod", "anchovy"
    ],
    "shellfish": [
        "shrimp", "crab", "lobster", "shellfish", "crustacean"
    ],
    "soy": [
        "soy", "soybean", "tofu", "tempeh", "miso"
    ],
    "nuts": [
        "almond", "walnut", "pecan", "cashew", "pistachio", "hazelnut",
        "brazil nut"
    ],
}


# ==============================================================================
# PFAS COMPOUND REGISTRY
# ==============================================================================

PFAS_REGISTRY: List[Dict] = [
    {
        "name": "PFOA",
        "cas_number": "335-67-1",
        "aliases": ["Perfluorooctanoic acid", "C8"],
        "toxicity_index": 9,
        "regulatory_status": "regulated",
        "health_risk": "Cancer, liver damage, decreased fertility",
    },
    {
        "name": "PFOS",
        "cas_number": "1763-23-1",
        "aliases": ["Perfluorooctane sulfonic acid"],
        "toxicity_index": 8,
        "regulatory_status": "regulated",
        "health_risk": "Immune system effects, cancer",
    },
    {
        "name": "PFNA",
        "cas_number": "375-95-1",
        "aliases": ["Perfluorononanoic acid"],
        "toxicity_index": 7,
        "regulatory_status": "monitoring",
        "health_risk": "Developmental effects, liver toxicity",
    },
    {
        "name": "PFBS",
        "cas_number": "375-73-5",
        "aliases": ["Perfluorobutane sulfonic acid"],
        "toxicity_index": 6,
        "regulatory_status": "monitoring",
        "health_risk": "Kidney and liver effects",
    },
    {
        "name": "PFHxS",
        "cas_number": "355-46-4",
        "aliases": ["Perfluorohexane sulfonic acid"],
        "toxicity_index": 7,
        "regulatory_status": "monitoring",
        "health_risk": "Immune system suppression",
    },
]


# ==============================================================================
# INGREDIENT LEXICONS
# ==============================================================================

# Scoring: -10 per keyword found anywhere in the ingredient text
TOXIC_INGREDIENTS: List[str] = [
    "phthalates", "sucralose", "aspartame",
    "sodium benzoate", "red dye 40", "bpa",
    "high fructose corn syrup", "trans fat",
    "sodium nitrite", "sulfur dioxide",
    "potassium bromate", "propyl gallate",
]

# Classification: TOXIN tag
TOXIC_SUBSTANCES: List[str] = [
    "phthalates", "microplastics", "artificial colors",
    "red dye 40", "yellow dye 5", "blue dye 1",
    "sodium benzoate", "potassium sorbate",
    "bha", "bht", "tbhq", "propyl gallate",
    "aspartame", "sucralose", "acesulfame potassium",
]

# Classification: ARTIFICIAL tag
ARTIFICIAL_INGREDIENTS: List[str] = [
    "artificial flavor", "artificial color", "artificial sweetener",
    "high fructose corn syrup", "corn syrup",
    "monosodium glutamate", "msg", "modified corn starch",
]

# Classification: BENEFICIAL tag
BENEFICIAL_INGREDIENTS: List[str] = [
    "organic", "natural", "vitamin", "mineral",
    "fiber", "protein", "omega", "antioxidant",
    "probiotic", "whole grain", "spring water",
    "filtered water", "electrolytes",
]

# Regulatory additive code: "E" followed by 3-4 digits, with any suffix (E160aii)
E_NUMBER_PATTERN = re.compile(r"\be\d{3,4}", re.IGNORECASE)


# ==============================================================================
# SCORING RULES
# ==============================================================================

BASE_SCORE: int = 100

# Contaminant penalty = weight% * severity * ratio * scale, per item capped
CONTAMINANT_SCALE: float = 60.0
CONTAMINANT_RATIO_CAP: float = 2.0
CONTAMINANT_ITEM_CAP: float = 15.0
CONTAMINANT_EXCEEDS_LIMIT_PENALTY: float = 10.0
CONTAMINANT_TOTAL_CAP: float = 60.0

ALLERGEN_PENALTY: int = 25

LAB_UNVERIFIED_PENALTY: int = 25
LAB_VERIFIED_BONUS: int = 5

WATER_SOURCE_ADJUSTMENTS: Dict[str, int] = {
    "municipal": -15,
    "spring": 10,
    "aquifer": 10,
    "filtered": 5,
}

# (lower-exclusive ppt threshold, penalty), checked top-down
PFAS_LEVEL_PENALTIES: List[Tuple[float, int]] = [
    (70.0, 50),
    (20.0, 30),
    (4.0, 15),
]
PFAS_TRACE_PENALTY: int = 5
PFAS_COMPOUND_THRESHOLD: int = 3
PFAS_MULTI_COMPOUND_PENALTY: int = 10
PFAS_PENALTY_CAP: int = 50
PFAS_USER_LIMIT_PENALTY: int = 15

PACKAGING_PENALTIES: Dict[str, int] = {
    "glass": 0,
    "plastic": 5,
    "aluminum": 10,
    "none": 0,
}

PH_ACCEPTABLE_RANGE: Tuple[float, float] = (6.5, 8.5)
PH_OPTIMAL_RANGE: Tuple[float, float] = (7.0, 7.5)
PH_OUT_OF_RANGE_PENALTY: int = 10
PH_OPTIMAL_BONUS: int = 5

TOXIC_INGREDIENT_PENALTY: int = 10
E_NUMBER_PENALTY: int = 5

# Label tag (prefix stripped) -> bonus points
LABEL_BONUSES: Dict[str, int] = {
    "organic": 15,
    "natural": 8,
    "non-gmo": 5,
}

# riskSensitivity 1 (conservative) .. 5 (permissive); 3 leaves scores unchanged
RISK_SENSITIVITY_MIN: int = 1
RISK_SENSITIVITY_MAX: int = 5
RISK_SENSITIVITY_MIDPOINT: int = 3
DEFAULT_RISK_SENSITIVITY: int = 3

SCORE_FLOOR: int = 0
SCORE_CEILING: int = 100


# ==============================================================================
# RATINGS
# ==============================================================================

RATING_THRESHOLDS: Dict[str, float] = {
    "Excellent": 80.0,      # 80-100
    "Good": 60.0,           # 60-79
    "Moderate Risk": 40.0,  # 40-59
    "High Risk": 0.0,       # 0-39
}

GRADE_THRESHOLDS: Dict[str, float] = {
    "A": 90.0,
    "B": 80.0,
    "C": 70.0,
    "D": 60.0,
    "F": 0.0,
}


# ==============================================================================
# RISK VERDICT
# ==============================================================================

HIGH_SEVERITY_THRESHOLD: int = 4
MEDIUM_SEVERITY_THRESHOLD: int = 3

RISK_RECOMMENDATIONS: Dict[str, List[str]] = {
    "critical": [
        "Avoid this product - serious health risks detected",
        "Consider reporting to local health authorities",
    ],
    "high": [
        "Use caution - significant contaminants detected",
        "Consider safer alternatives",
    ],
    "medium": [
        "Monitor usage - some contaminants present",
        "Consider filtration if using regularly",
    ],
    "low": [],
}

NO_CONTAMINANTS_RECOMMENDATION: str = "This product appears to be free of major contaminants"


# ==============================================================================
# RECOMMENDATIONS
# ==============================================================================

BASE_CONFIDENCE: float = 0.5
MIN_CONFIDENCE: float = 0.4
MAX_RECOMMENDATIONS: int = 5

CONFIDENCE_INCREMENTS: Dict[str, float] = {
    "pfas_free": 0.2,
    "lab_verified": 0.15,
    "fewer_contaminants": 0.1,
    "glass_packaging": 0.1,
    "preferred_packaging": 0.1,
    "avoided_contaminant": -0.2,
}

# healthGoal -> confidence increment when the candidate satisfies it
HEALTH_GOAL_INCREMENTS: Dict[str, float] = {
    "pfas_free": 0.15,
    "organic": 0.1,
    "plastic_free": 0.1,
}

# Ranking favors magnitude of improvement over certainty
IMPROVEMENT_RANK_WEIGHT: float = 0.7
CONFIDENCE_RANK_WEIGHT: float = 0.3

DEFAULT_RECOMMENDATION_REASON: str = "Better overall health score"

# Insight thresholds (share of scan history)
INSIGHT_THRESHOLDS: Dict[str, float] = {
    "pfas": 0.3,
    "unverified": 0.5,
    "plastic": 0.6,
}
