"""
Tests for alternative recommendations and personalized insights.
"""

import pytest

from safescan.models.product import Contaminant, Product, UserPreferences, UserProfile
from safescan.services.recommendation_engine import RecommendationEngine


def test_ranked_by_improvement_and_confidence(engine, pfas_water, bottled_catalog):
    recs = engine.recommend_alternatives(pfas_water, 25, bottled_catalog)

    assert [r.product.id for r in recs] == ["bw-glass", "bw-verified", "bw-plastic"]
    assert [r.score_improvement for r in recs] == [75, 60, 50]

    best = recs[0]
    assert best.score == 100
    assert best.category == "pfas_free"
    assert best.confidence == pytest.approx(0.95)
    assert best.reason == "PFAS-free, Lab verified, Glass packaging"

    assert recs[2].confidence == pytest.approx(0.7)
    assert recs[2].reason == "PFAS-free"


def test_only_strictly_better_same_category(engine, tap_water, spring_water, bottled_catalog):
    catalog = bottled_catalog + [tap_water, spring_water]
    better_tap = tap_water.model_copy(update={"id": "tap-002", "lab_verified": True})
    catalog.append(better_tap)

    recs = engine.recommend_alternatives(tap_water, 60, catalog)

    assert [r.product.id for r in recs] == ["tap-002"]
    assert recs[0].category == "lab_verified"


def test_equal_score_excluded(engine, tap_water):
    twin = tap_water.model_copy(update={"id": "tap-twin"})
    assert engine.recommend_alternatives(tap_water, 60, [twin]) == []


def test_empty_catalog(engine, tap_water):
    assert engine.recommend_alternatives(tap_water, 60, []) == []


def test_fewer_contaminants_category(engine, lead, chlorine):
    current = Product(
        id="cur", category="tap_water", lab_verified=True,
        contaminants=[lead, chlorine],
    )
    candidate = Product(
        id="alt", category="tap_water", lab_verified=True, contaminants=[chlorine],
    )

    recs = engine.recommend_alternatives(current, 70, [candidate])

    assert len(recs) == 1
    assert recs[0].category == "lower_contaminants"
    assert recs[0].reason == "1 fewer contaminants"


def test_default_reason(engine):
    current = Product(id="cur", category="food", packaging="aluminum", lab_verified=True)
    candidate = Product(
        id="alt", category="food", lab_verified=True, label_tags=["en:natural"],
    )

    recs = engine.recommend_alternatives(current, 95, [candidate])

    assert recs[0].score_improvement == 5
    assert recs[0].category == "better_alternative"
    assert recs[0].reason == "Better overall health score"
    assert recs[0].confidence == pytest.approx(0.5)


def test_avoided_contaminant_drops_low_confidence(engine):
    current = Product(
        id="cur", category="bottled_water", packaging="plastic",
        source="municipal", ph=9.0, lab_verified=True,
    )
    microplastics = Contaminant(
        name="Microplastics", category="microplastics", severity=1,
        concentration=1.0, unit="ppm",
    )
    candidate = Product(
        id="alt", category="bottled_water", packaging="aluminum",
        source="spring", ph=7.2, lab_verified=True, contaminants=[microplastics],
    )
    profile = UserProfile(preferences=UserPreferences(avoid_contaminants=["microplastics"]))

    assert engine.recommend_alternatives(current, 75, [candidate], profile) == []

    # glass adds back just enough to meet the minimum
    glass = candidate.model_copy(update={"packaging": "glass"})
    recs = engine.recommend_alternatives(current, 75, [glass], profile)
    assert len(recs) == 1
    assert recs[0].confidence == pytest.approx(0.4)


def test_profile_goals_cap_confidence(engine, pfas_water, bottled_catalog, careful_profile):
    recs = engine.recommend_alternatives(pfas_water, 0, bottled_catalog, careful_profile)

    glass = next(r for r in recs if r.product.id == "bw-glass")
    assert glass.confidence == 1.0


def test_organic_goal_adds_reason(engine):
    current = Product(id="cur", category="food", lab_verified=False)
    candidate = Product(
        id="alt", category="food", lab_verified=True, label_tags=["en:organic"],
    )
    profile = UserProfile(health_goals=["organic"])

    recs = engine.recommend_alternatives(current, 75, [candidate], profile)

    assert recs[0].reason == "Lab verified, Organic"
    assert recs[0].confidence == pytest.approx(0.75)


def test_max_results_respected(scorer, pfas_water, bottled_catalog):
    engine = RecommendationEngine(scorer, max_results=2)
    recs = engine.recommend_alternatives(pfas_water, 25, bottled_catalog)
    assert [r.product.id for r in recs] == ["bw-glass", "bw-verified"]


def test_catalog_not_modified(engine, pfas_water, bottled_catalog):
    snapshot = [p.model_dump() for p in bottled_catalog]
    engine.recommend_alternatives(pfas_water, 25, bottled_catalog)
    assert [p.model_dump() for p in bottled_catalog] == snapshot


class TestInsights:

    def test_empty_history(self, engine):
        insights = engine.get_personalized_insights([], UserProfile(health_goals=["pfas_free"]))

        assert insights.average_score == 0
        assert insights.improvement_opportunities == []
        assert insights.health_goal_progress == []

    def test_history_summary(self, engine, pfas_water, tap_water, bottled_catalog):
        history = [pfas_water, tap_water, bottled_catalog[0]]
        profile = UserProfile(health_goals=["pfas_free", "organic", "low_sodium"])

        insights = engine.get_personalized_insights(history, profile)

        # 25, 60 and 75
        assert insights.average_score == 53
        assert insights.improvement_opportunities == [
            "Consider PFAS-free alternatives",
            "Choose more lab-verified products",
            "Switch to glass packaging when possible",
        ]
        assert [(g.goal, g.progress) for g in insights.health_goal_progress] == [
            ("pfas_free", 67),
            ("organic", 0),
            ("low_sodium", 0),
        ]

    def test_clean_history_has_no_opportunities(self, engine, spring_water):
        insights = engine.get_personalized_insights([spring_water])

        assert insights.average_score == 100
        assert insights.improvement_opportunities == []
