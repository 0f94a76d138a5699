"""
Tests for ingredient classification precedence and descriptions.
"""

import pytest

from safescan.models.classification import IngredientTag
from safescan.models.product import Contaminant
from safescan.services.ingredient_classifier import CLASSIFICATION_RULES


def tags(results):
    return [item.tag for item in results]


def test_empty_input_returns_empty_list(classifier):
    assert classifier.classify_ingredients([], [], ["dairy"]) == []


def test_allergen_beats_beneficial(classifier):
    results = classifier.classify_ingredients(["Organic milk"], [], ["dairy"])

    assert results[0].tag == IngredientTag.ALLERGEN
    assert results[0].risk == "high"
    assert results[0].matched == "milk"


def test_beneficial_when_allergen_not_selected(classifier):
    results = classifier.classify_ingredients(["Organic milk"], [], [])
    assert results[0].tag == IngredientTag.BENEFICIAL
    assert results[0].risk == "none"


def test_one_result_per_ingredient_in_order(classifier):
    ingredients = [
        "Filtered water",
        "E330",
        "Artificial flavor",
        "Sucralose",
        "Sugar",
    ]
    results = classifier.classify_ingredients(ingredients, [], [])

    assert [r.name for r in results] == ingredients
    assert tags(results) == [
        IngredientTag.BENEFICIAL,
        IngredientTag.ADDITIVE,
        IngredientTag.ARTIFICIAL,
        IngredientTag.TOXIN,
        IngredientTag.SAFE,
    ]
    assert results[4].description == "Generally safe ingredient"


def test_contaminant_uses_health_risk_and_severity(classifier, lead, chlorine):
    results = classifier.classify_ingredients(
        ["Lead traces", "Chlorine"], [lead, chlorine], []
    )

    assert tags(results) == [IngredientTag.CONTAMINANT, IngredientTag.CONTAMINANT]
    assert results[0].risk == "high"
    assert results[0].description == "Neurological damage, developmental issues"
    assert results[1].risk == "medium"


def test_pfas_registry_exact_match(classifier):
    results = classifier.classify_ingredients(
        ["PFOA", "335-67-1", "perfluorooctane sulfonic acid", "PFOA-free coating"],
        [],
        []
    )

    assert tags(results)[:3] == [IngredientTag.PFAS] * 3
    assert results[0].description == "Cancer, liver damage, decreased fertility"
    assert results[2].matched == "PFOS"
    assert results[3].tag != IngredientTag.PFAS


def test_contaminant_beats_pfas(classifier):
    measured = Contaminant(
        name="PFOA", category="pfas", severity=5,
        concentration=12.0, unit="ppt", health_risk="Measured in this batch"
    )
    results = classifier.classify_ingredients(["PFOA"], [measured], [])

    assert results[0].tag == IngredientTag.CONTAMINANT
    assert results[0].description == "Measured in this batch"


def test_toxin_beats_artificial(classifier):
    # "aspartame" is a toxin, "artificial sweetener" is artificial
    results = classifier.classify_ingredients(
        ["Artificial sweetener (aspartame)"], [], []
    )
    assert results[0].tag == IngredientTag.TOXIN
    assert results[0].description == "Potentially harmful substance"


def test_unknown_allergen_matches_its_name(classifier):
    results = classifier.classify_ingredients(["Toasted sesame oil"], [], ["Sesame"])
    assert results[0].tag == IngredientTag.ALLERGEN


def test_summary_counts_every_tag(classifier):
    results = classifier.classify_ingredients(
        ["Whole milk", "Vitamin D3", "Water"], [], ["dairy"]
    )
    summary = classifier.summarize(results)

    assert summary.total == 3
    assert list(summary.counts) == [tag.value for tag in IngredientTag]
    assert summary.counts["ALLERGEN"] == 1
    assert summary.counts["BENEFICIAL"] == 1
    assert summary.counts["SAFE"] == 1
    assert summary.counts["TOXIN"] == 0


def test_rule_table_follows_tag_precedence():
    declared = [rule.tag for rule in CLASSIFICATION_RULES]
    assert declared == list(IngredientTag)[:-1]


@pytest.mark.parametrize("ingredient, expected", [
    ("Natural flavors", IngredientTag.BENEFICIAL),
    ("Monosodium glutamate", IngredientTag.ARTIFICIAL),
    ("Color (E150d)", IngredientTag.ADDITIVE),
    ("Colour E160ai", IngredientTag.ADDITIVE),
    ("Emulsifier E472e", IngredientTag.ADDITIVE),
    ("Caramel E150c1", IngredientTag.ADDITIVE),
    ("Lecithin E322ii", IngredientTag.ADDITIVE),
    ("BHT", IngredientTag.TOXIN),
    ("Salt", IngredientTag.SAFE),
])
def test_single_ingredient_tags(classifier, ingredient, expected):
    assert classifier.classify_ingredients([ingredient])[0].tag == expected
