"""
Input validation utilities.

This module provides validation functions for request payloads so that
malformed input fails fast at the API boundary, before the scoring services
run. The services themselves trust their inputs.
"""

import re
import logging
from typing import List, Sequence

# Configure logging
logger = logging.getLogger(__name__)


def validate_ingredient_list(ingredients: List[str], max_items: int = 100) -> bool:
    """
    Validate ingredient list.

    Ensures ingredient list:
    - Does not exceed the maximum number of items
    - Each ingredient is a string
    - No ingredient is excessively long
    - No ingredient contains script-like content

    An empty list is valid: it classifies to an empty result.

    Args:
        ingredients: List of ingredient strings
        max_items: Maximum number of ingredients accepted

    Returns:
        bool: True if valid

    Raises:
        ValueError: If validation fails with specific error message
    """
    if len(ingredients) > max_items:
        raise ValueError(
            f"Ingredient list cannot exceed {max_items} items "
            f"(got {len(ingredients)})"
        )

    for i, ingredient in enumerate(ingredients):
        if not isinstance(ingredient, str):
            raise ValueError(
                f"Ingredient at index {i} must be a string, "
                f"got {type(ingredient).__name__}"
            )

        if len(ingredient) > 500:
            raise ValueError(
                f"Ingredient at index {i} exceeds maximum length of 500 characters"
            )

        dangerous_patterns = [
            r'<script',
            r'javascript:',
            r'on\w+\s*='
        ]

        for pattern in dangerous_patterns:
            if re.search(pattern, ingredient, re.IGNORECASE):
                raise ValueError(
                    f"Ingredient at index {i} contains invalid characters"
                )

    logger.debug(f"Ingredient list validated: {len(ingredients)} ingredients")
    return True


def validate_product_id(product_id: str) -> bool:
    """
    Validate product ID format.

    Ensures product ID is a valid identifier without dangerous characters.
    Barcodes, UUIDs and slugs are all accepted.

    Args:
        product_id: Product identifier string

    Returns:
        bool: True if valid

    Raises:
        ValueError: If validation fails
    """
    if not product_id or not product_id.strip():
        raise ValueError("Product ID cannot be empty")

    if len(product_id) > 100:
        raise ValueError("Product ID cannot exceed 100 characters")

    if not re.match(r'^[a-zA-Z0-9_.:-]+$', product_id):
        raise ValueError(
            "Product ID must contain only alphanumeric characters, "
            "dots, colons, hyphens, and underscores"
        )

    return True


def validate_catalog(product_ids: Sequence[str], max_size: int = 500) -> bool:
    """
    Validate a catalog snapshot before ranking.

    Args:
        product_ids: IDs of all catalog members
        max_size: Maximum number of products accepted in one request

    Returns:
        bool: True if valid

    Raises:
        ValueError: If the catalog is too large or has duplicate IDs
    """
    if len(product_ids) > max_size:
        raise ValueError(
            f"Catalog cannot exceed {max_size} products (got {len(product_ids)})"
        )

    seen = set()
    for product_id in product_ids:
        validate_product_id(product_id)
        if product_id in seen:
            raise ValueError(f"Duplicate product ID in catalog: {product_id}")
        seen.add(product_id)

    logger.debug(f"Catalog validated: {len(product_ids)} products")
    return True
