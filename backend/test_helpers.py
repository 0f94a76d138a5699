"""
Tests for the shared lookup and matching helpers.
"""

import pytest

from safescan.utils.helpers import (
    canonical_pfas_name,
    contains_e_number,
    get_allergen_keywords,
    strip_tag_prefix,
)


def test_allergen_keywords():
    assert get_allergen_keywords("gluten") == ["wheat", "barley", "rye", "gluten", "malt", "flour"]
    assert get_allergen_keywords("Sesame") == ["sesame"]


def test_strip_tag_prefix():
    assert strip_tag_prefix("en:Organic") == "organic"
    assert strip_tag_prefix("non-gmo") == "non-gmo"


@pytest.mark.parametrize("text, expected", [
    ("en:e150d", True),
    ("E160aii", True),
    ("en:e150c1", True),
    ("citric acid", False),
    ("vitamin b12", False),
])
def test_contains_e_number(text, expected):
    assert contains_e_number(text) is expected


@pytest.mark.parametrize("name", ["PFOA", "pfoa", "Perfluorooctanoic acid", "C8", "335-67-1"])
def test_canonical_pfas_name_registry_forms(name):
    assert canonical_pfas_name(name) == "PFOA"


def test_canonical_pfas_name_unregistered():
    assert canonical_pfas_name(" GenX ") == "genx"
