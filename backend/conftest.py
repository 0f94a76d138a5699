"""
Shared pytest fixtures: services and sample products.
"""

import pytest

from safescan.models.product import Contaminant, Product, UserPreferences, UserProfile
from safescan.services.health_scorer import HealthScorer
from safescan.services.ingredient_classifier import IngredientClassifier
from safescan.services.recommendation_engine import RecommendationEngine
from safescan.services.risk_assessor import ContaminantRiskAssessor


@pytest.fixture
def scorer():
    return HealthScorer()


@pytest.fixture
def classifier():
    return IngredientClassifier()


@pytest.fixture
def assessor():
    return ContaminantRiskAssessor()


@pytest.fixture
def engine(scorer):
    return RecommendationEngine(scorer)


@pytest.fixture
def neutral_profile():
    return UserProfile()


@pytest.fixture
def lead():
    return Contaminant(
        name="Lead",
        category="heavy_metals",
        severity=4,
        concentration=20.0,
        unit="ppb",
        max_allowed=15.0,
        health_risk="Neurological damage, developmental issues",
    )


@pytest.fixture
def chlorine():
    return Contaminant(
        name="Chlorine",
        category="disinfectants",
        severity=2,
        concentration=1.0,
        unit="ppm",
        max_allowed=4.0,
        health_risk="Eye and nose irritation",
    )


@pytest.fixture
def tap_water():
    """Municipal tap water in plastic, unverified, optimal pH. Scores 60."""
    return Product(
        id="tap-001",
        name="City Tap Water",
        category="tap_water",
        packaging="plastic",
        source="municipal",
        ph=7.2,
        lab_verified=False,
    )


@pytest.fixture
def spring_water():
    """Verified spring water in glass, optimal pH. Raw 120, scores 100."""
    return Product(
        id="spring-001",
        name="Mountain Spring",
        category="bottled_water",
        packaging="glass",
        source="spring",
        ph=7.2,
        lab_verified=True,
    )


@pytest.fixture
def pfas_water():
    return Product(
        id="pfas-001",
        name="Budget Bottled Water",
        category="bottled_water",
        packaging="plastic",
        source="municipal",
        ph=7.8,
        lab_verified=False,
        pfas_detected=True,
        pfas_level=25.0,
        pfas_compounds=["PFOA", "PFOS"],
    )


@pytest.fixture
def bottled_catalog():
    """Bottled water catalog of increasing quality."""
    return [
        Product(
            id="bw-plastic",
            name="Plain Bottled",
            category="bottled_water",
            packaging="plastic",
            source="filtered",
            ph=7.8,
            lab_verified=False,
        ),
        Product(
            id="bw-verified",
            name="Verified Purified",
            category="bottled_water",
            packaging="plastic",
            source="municipal",
            ph=7.8,
            lab_verified=True,
        ),
        Product(
            id="bw-glass",
            name="Glass Spring",
            category="bottled_water",
            packaging="glass",
            source="spring",
            ph=7.2,
            lab_verified=True,
        ),
    ]


@pytest.fixture
def careful_profile():
    return UserProfile(
        selected_allergens=["dairy"],
        risk_sensitivity=1,
        health_goals=["pfas_free"],
        preferences=UserPreferences(
            max_pfas=10.0,
            preferred_packaging=["glass"],
            avoid_contaminants=["microplastics"],
        ),
    )
