"""
Tests for boundary validation helpers.
"""

import pytest

from safescan.utils.validators import (
    validate_catalog,
    validate_ingredient_list,
    validate_product_id,
)


def test_empty_ingredient_list_is_valid():
    assert validate_ingredient_list([]) is True


def test_ingredient_list_too_long():
    with pytest.raises(ValueError, match="cannot exceed 3 items"):
        validate_ingredient_list(["a", "b", "c", "d"], max_items=3)


def test_ingredient_must_be_string():
    with pytest.raises(ValueError, match="index 1 must be a string"):
        validate_ingredient_list(["water", 42])


@pytest.mark.parametrize("product_id", ["0123456789012", "en:water-1", "sku_9.2"])
def test_valid_product_ids(product_id):
    assert validate_product_id(product_id) is True


@pytest.mark.parametrize("product_id", ["", "   ", "a b", "x" * 101, "<id>"])
def test_invalid_product_ids(product_id):
    with pytest.raises(ValueError):
        validate_product_id(product_id)


def test_catalog_duplicates_rejected():
    with pytest.raises(ValueError, match="Duplicate product ID"):
        validate_catalog(["a", "b", "a"])


def test_catalog_size_limit():
    with pytest.raises(ValueError, match="cannot exceed 2 products"):
        validate_catalog(["a", "b", "c"], max_size=2)
