"""
API tests against the FastAPI app using TestClient.
"""

import pytest
from fastapi.testclient import TestClient

from safescan import main
from safescan.main import app
from safescan.models.health_score import HealthScore


@pytest.fixture
def client():
    return TestClient(app)


TAP_WATER = {
    "id": "tap-001",
    "name": "City Tap Water",
    "category": "tap_water",
    "packaging": "plastic",
    "source": "municipal",
    "ph": 7.2,
    "lab_verified": False,
}

SPRING_WATER = {
    "id": "spring-001",
    "category": "tap_water",
    "packaging": "glass",
    "source": "spring",
    "ph": 7.2,
    "lab_verified": True,
}

LEAD = {
    "name": "Lead",
    "category": "heavy_metals",
    "severity": 4,
    "concentration": 20.0,
    "unit": "ppb",
    "max_allowed": 15.0,
    "health_risk": "Neurological damage",
}


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "running"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_score(client):
    response = client.post("/score", json={"product": TAP_WATER})

    assert response.status_code == 200
    data = response.json()
    assert data["score"] == 60
    assert data["rating"] == "Good"
    assert data["breakdown"]["explanation"][0] == "Not lab verified: -25 points"


def test_score_with_profile(client):
    response = client.post(
        "/score",
        json={"product": TAP_WATER, "user_profile": {"risk_sensitivity": 1}},
    )
    assert response.json()["score"] == 33


def test_score_rejects_bad_severity(client):
    product = dict(TAP_WATER, contaminants=[dict(LEAD, severity=9)])
    response = client.post("/score", json={"product": product})
    assert response.status_code == 422


def test_score_rejects_bad_product_id(client):
    product = dict(TAP_WATER, id="tap 001; drop")
    response = client.post("/score", json={"product": product})

    assert response.status_code == 400
    assert "Product ID" in response.json()["detail"]


def test_classify(client):
    response = client.post(
        "/classify",
        json={
            "ingredients": ["Organic whole milk", "Vitamin D3", "E330"],
            "selected_allergens": ["Dairy"],
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert [item["tag"] for item in data["ingredients"]] == ["ALLERGEN", "BENEFICIAL", "ADDITIVE"]
    assert data["summary"]["total"] == 3


def test_classify_rejects_script(client):
    response = client.post("/classify", json={"ingredients": ["<script>alert(1)</script>"]})
    assert response.status_code == 400


def test_assess(client):
    response = client.post("/assess", json={"contaminants": [LEAD]})

    assert response.status_code == 200
    assert response.json()["overall_risk"] == "critical"


def test_assess_empty(client):
    response = client.post("/assess", json={"contaminants": []})
    assert response.json()["overall_risk"] == "low"


def test_recommend_computes_missing_score(client):
    response = client.post(
        "/recommend",
        json={"product": TAP_WATER, "catalog": [TAP_WATER, SPRING_WATER]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["current_score"] == 60
    assert [r["product"]["id"] for r in data["recommendations"]] == ["spring-001"]
    assert data["recommendations"][0]["score_improvement"] == 40


def test_recommend_rejects_duplicate_catalog_ids(client):
    response = client.post(
        "/recommend",
        json={"product": TAP_WATER, "catalog": [SPRING_WATER, SPRING_WATER]},
    )
    assert response.status_code == 400


def test_compare(client):
    response = client.post("/compare", json={"products": [TAP_WATER, SPRING_WATER]})

    assert response.status_code == 200
    assert [item["product"]["id"] for item in response.json()["ranked"]] == [
        "spring-001", "tap-001"
    ]


def test_insights(client):
    response = client.post(
        "/insights",
        json={
            "scan_history": [TAP_WATER, TAP_WATER],
            "user_profile": {"health_goals": ["plastic_free"]},
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["average_score"] == 60
    assert "Switch to glass packaging when possible" in data["improvement_opportunities"]
    assert data["health_goal_progress"] == [{"goal": "plastic_free", "progress": 0}]


def test_analyze(client):
    product = dict(
        TAP_WATER,
        contaminants=[LEAD],
        ingredients=["Water", "Lead"],
    )
    response = client.post(
        "/analyze",
        json={"product": product, "catalog": [SPRING_WATER]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["risk"]["overall_risk"] == "critical"
    assert [item["tag"] for item in data["ingredients"]] == ["SAFE", "CONTAMINANT"]
    assert data["recommendations"][0]["product"]["id"] == "spring-001"
    assert data["advice"].startswith("AVOID")


def test_analyze_allergen_advice(client):
    product = {
        "id": "milk-1",
        "category": "beverage",
        "lab_verified": True,
        "packaging": "glass",
        "ingredients": ["Whole milk"],
    }
    response = client.post(
        "/analyze",
        json={"product": product, "user_profile": {"selected_allergens": ["dairy"]}},
    )

    data = response.json()
    assert data["summary"]["counts"]["ALLERGEN"] == 1
    assert data["advice"] == "AVOID: Contains allergens from your profile"


def test_model_error_inside_service_is_500(client, monkeypatch):
    def broken_score(product, profile):
        return HealthScore(score=150, rating="Excellent", grade="A")

    monkeypatch.setattr(main.health_scorer, "calculate_health_score", broken_score)
    response = client.post("/score", json={"product": TAP_WATER})

    assert response.status_code == 500
    assert response.json()["detail"].startswith("Failed to score product")
