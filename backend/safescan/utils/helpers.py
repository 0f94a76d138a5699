"""
Common utility helper functions.

This module provides reusable lookups and text-matching helpers used by the
scoring, classification and recommendation services. All functions are pure
and read only the constant tables in `safescan.utils.constants`.
"""

import logging
from typing import Dict, Iterable, List, Optional

from safescan.utils.constants import (
    ALLERGEN_KEYWORDS,
    CONTAMINANT_WEIGHTS,
    DEFAULT_CONTAMINANT_WEIGHT,
    E_NUMBER_PATTERN,
    PFAS_REGISTRY,
)

# Configure logging
logger = logging.getLogger(__name__)


def get_contaminant_weight(category: str) -> float:
    """
    Look up the relative-importance weight (percent) of a contaminant category.

    Categories missing from the weight table degrade to the default weight
    instead of failing.

    Args:
        category: Contaminant category (e.g., "pfas", "heavy_metals")

    Returns:
        float: Weight percentage

    Example:
        >>> get_contaminant_weight("pfas")
        9.68
        >>> get_contaminant_weight("chemical")
        1.0
    """
    weight = CONTAMINANT_WEIGHTS.get(category)
    if weight is None:
        logger.debug(f"No weight for category '{category}', using default")
        return DEFAULT_CONTAMINANT_WEIGHT
    return weight


def get_allergen_keywords(allergen: str) -> List[str]:
    """
    Return the synonym list for an allergen identifier.

    Unknown identifiers match on their own (lower-cased) name.

    Example:
        >>> get_allergen_keywords("gluten")
        ['wheat', 'barley', 'rye', 'gluten', 'malt', 'flour']
        >>> get_allergen_keywords("sesame")
        ['sesame']
    """
    key = normalize_text(allergen)
    return ALLERGEN_KEYWORDS.get(key, [key])


def normalize_text(text: Optional[str]) -> str:
    """Lowercase and trim a free-text value."""
    if not text:
        return ""
    return text.strip().lower()


def strip_tag_prefix(tag: str) -> str:
    """
    Normalize a classification tag by dropping a language prefix.

    Example:
        >>> strip_tag_prefix("en:Organic")
        'organic'
    """
    normalized = normalize_text(tag)
    if ":" in normalized:
        normalized = normalized.split(":", 1)[1]
    return normalized


def find_keywords(text: str, keywords: Iterable[str]) -> List[str]:
    """
    Find which keywords occur as substrings of the given text.

    Matching is case-insensitive. Each keyword is reported at most once,
    in lexicon order.

    Args:
        text: Text to search (ingredient name or joined ingredient list)
        keywords: Lexicon to search for

    Returns:
        List[str]: Matched keywords
    """
    haystack = normalize_text(text)
    if not haystack:
        return []
    return [kw for kw in keywords if kw.lower() in haystack]


def first_keyword(text: str, keywords: Iterable[str]) -> Optional[str]:
    """Return the first lexicon keyword found in text, or None."""
    haystack = normalize_text(text)
    if not haystack:
        return None
    for kw in keywords:
        if kw.lower() in haystack:
            return kw
    return None


def match_allergen(text: str, allergen: str) -> Optional[str]:
    """
    Check whether text contains any synonym of an allergen.

    Args:
        text: Ingredient text or allergen tag
        allergen: Allergen identifier (e.g., "dairy")

    Returns:
        str: The matching synonym, or None
    """
    return first_keyword(text, get_allergen_keywords(allergen))


def contains_e_number(text: str) -> bool:
    """
    Detect a regulatory additive code (E-number) in text.

    Example:
        >>> contains_e_number("en:e150d")
        True
        >>> contains_e_number("citric acid")
        False
    """
    if not text:
        return False
    return E_NUMBER_PATTERN.search(text) is not None


def find_pfas_compound(ingredient: str) -> Optional[Dict]:
    """
    Look up an ingredient in the PFAS compound registry.

    Matches exactly (case-insensitive) on compound name, CAS number or any
    registered alias.

    Args:
        ingredient: Ingredient text

    Returns:
        Dict: Registry entry, or None if the ingredient is not a known PFAS
    """
    key = normalize_text(ingredient)
    if not key:
        return None
    for compound in PFAS_REGISTRY:
        candidates = [compound["name"], compound["cas_number"], *compound["aliases"]]
        if any(key == candidate.lower() for candidate in candidates):
            return compound
    return None


def canonical_pfas_name(name: str) -> str:
    """
    Reduce a PFAS compound reference to one key per compound.

    Registry names, aliases and CAS numbers all map to the registry name;
    unregistered compounds keep their normalized text.

    Example:
        >>> canonical_pfas_name("335-67-1")
        'PFOA'
        >>> canonical_pfas_name(" GenX ")
        'genx'
    """
    compound = find_pfas_compound(name)
    if compound is not None:
        return compound["name"]
    return normalize_text(name)


def safe_divide(numerator: float, denominator: Optional[float], default: float = 0.0) -> float:
    """
    Safely divide two numbers, returning default if denominator is zero or missing.

    Args:
        numerator: Number to divide
        denominator: Number to divide by
        default: Value to return when division is impossible

    Returns:
        float: Division result or default
    """
    if not denominator:
        return default
    return numerator / denominator


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value to the closed interval [low, high]."""
    return max(low, min(high, value))
