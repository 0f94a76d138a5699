"""
Ingredient classification service.

This module labels each ingredient of a product with exactly one risk tag
using keyword matching against fixed lexicons, the product's measured
contaminants and the user's allergen selections.

Checks run in strict precedence order and stop at the first match, so an
allergen is never masked by a lower-priority tag:
1. ALLERGEN     - synonym of a user-selected allergen
2. CONTAMINANT  - name of a contaminant measured in the product
3. PFAS         - exact name / CAS / alias match in the PFAS registry
4. TOXIN        - known harmful substance
5. ADDITIVE     - E-number code
6. ARTIFICIAL   - artificial ingredient
7. BENEFICIAL   - beneficial ingredient
8. SAFE         - default
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from safescan.models.classification import (
    ClassificationSummary,
    ClassifiedIngredient,
    IngredientTag,
)
from safescan.models.product import Contaminant
from safescan.utils.constants import (
    ARTIFICIAL_INGREDIENTS,
    BENEFICIAL_INGREDIENTS,
    HIGH_SEVERITY_THRESHOLD,
    TOXIC_SUBSTANCES,
)
from safescan.utils.helpers import (
    contains_e_number,
    find_pfas_compound,
    first_keyword,
    match_allergen,
    normalize_text,
)

# Configure logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationContext:
    """
    Product-level inputs shared by every rule for one classification call.

    Attributes:
        contaminants: Contaminants measured in the product
        selected_allergens: User-selected allergen identifiers
    """
    contaminants: Sequence[Contaminant] = field(default_factory=tuple)
    selected_allergens: Sequence[str] = field(default_factory=tuple)


@dataclass(frozen=True)
class ClassificationRule:
    """
    One entry in the precedence table.

    Attributes:
        name: Rule name for logging
        tag: Tag the rule assigns
        apply: Returns a ClassifiedIngredient when the rule matches, else None.
            Receives the trimmed ingredient, its lower-cased form and the context.
    """
    name: str
    tag: IngredientTag
    apply: Callable[[str, str, ClassificationContext], Optional[ClassifiedIngredient]]


def _allergen_rule(name: str, lowered: str, ctx: ClassificationContext) -> Optional[ClassifiedIngredient]:
    for allergen in ctx.selected_allergens:
        keyword = match_allergen(lowered, allergen)
        if keyword:
            return ClassifiedIngredient(
                name=name,
                tag=IngredientTag.ALLERGEN,
                risk="high",
                description=f"Contains {allergen} allergen in your profile",
                matched=keyword,
            )
    return None


def _contaminant_rule(name: str, lowered: str, ctx: ClassificationContext) -> Optional[ClassifiedIngredient]:
    for contaminant in ctx.contaminants:
        contaminant_name = normalize_text(contaminant.name)
        if contaminant_name and contaminant_name in lowered:
            return ClassifiedIngredient(
                name=name,
                tag=IngredientTag.CONTAMINANT,
                risk="high" if contaminant.severity >= HIGH_SEVERITY_THRESHOLD else "medium",
                description=contaminant.health_risk or "Measured contaminant",
                matched=contaminant.name,
            )
    return None


def _pfas_rule(name: str, lowered: str, ctx: ClassificationContext) -> Optional[ClassifiedIngredient]:
    compound = find_pfas_compound(lowered)
    if compound is None:
        return None
    return ClassifiedIngredient(
        name=name,
        tag=IngredientTag.PFAS,
        risk="high",
        description=compound["health_risk"],
        matched=compound["name"],
    )


def _toxin_rule(name: str, lowered: str, ctx: ClassificationContext) -> Optional[ClassifiedIngredient]:
    keyword = first_keyword(lowered, TOXIC_SUBSTANCES)
    if keyword is None:
        return None
    return ClassifiedIngredient(
        name=name,
        tag=IngredientTag.TOXIN,
        risk="medium",
        description="Potentially harmful substance",
        matched=keyword,
    )


def _additive_rule(name: str, lowered: str, ctx: ClassificationContext) -> Optional[ClassifiedIngredient]:
    if not contains_e_number(lowered):
        return None
    return ClassifiedIngredient(
        name=name,
        tag=IngredientTag.ADDITIVE,
        risk="low",
        description="Food additive (E-number)",
    )


def _artificial_rule(name: str, lowered: str, ctx: ClassificationContext) -> Optional[ClassifiedIngredient]:
    keyword = first_keyword(lowered, ARTIFICIAL_INGREDIENTS)
    if keyword is None:
        return None
    return ClassifiedIngredient(
        name=name,
        tag=IngredientTag.ARTIFICIAL,
        risk="low",
        description="Artificial ingredient",
        matched=keyword,
    )


def _beneficial_rule(name: str, lowered: str, ctx: ClassificationContext) -> Optional[ClassifiedIngredient]:
    keyword = first_keyword(lowered, BENEFICIAL_INGREDIENTS)
    if keyword is None:
        return None
    return ClassifiedIngredient(
        name=name,
        tag=IngredientTag.BENEFICIAL,
        risk="none",
        description="Beneficial ingredient",
        matched=keyword,
    )


# Precedence order; first match wins
CLASSIFICATION_RULES: List[ClassificationRule] = [
    ClassificationRule("allergen", IngredientTag.ALLERGEN, _allergen_rule),
    ClassificationRule("contaminant", IngredientTag.CONTAMINANT, _contaminant_rule),
    ClassificationRule("pfas", IngredientTag.PFAS, _pfas_rule),
    ClassificationRule("toxin", IngredientTag.TOXIN, _toxin_rule),
    ClassificationRule("additive", IngredientTag.ADDITIVE, _additive_rule),
    ClassificationRule("artificial", IngredientTag.ARTIFICIAL, _artificial_rule),
    ClassificationRule("beneficial", IngredientTag.BENEFICIAL, _beneficial_rule),
]


class IngredientClassifier:
    """
    Service class for tagging ingredients with a single risk category.

    Attributes:
        rules: Precedence-ordered rule table
    """

    def __init__(self, rules: Optional[List[ClassificationRule]] = None):
        """Initialize the classifier with the default rule table."""
        self.rules = list(rules) if rules is not None else list(CLASSIFICATION_RULES)

        logger.info(
            f"IngredientClassifier initialized with {len(self.rules)} rules: "
            f"{', '.join(rule.name for rule in self.rules)}"
        )

    def classify_ingredients(
        self,
        ingredients: List[str],
        contaminants: Optional[List[Contaminant]] = None,
        selected_allergens: Optional[List[str]] = None
    ) -> List[ClassifiedIngredient]:
        """
        Classify every ingredient of a product.

        This is the main entry point for classification. Output has exactly
        one entry per input ingredient, in input order.

        Args:
            ingredients: Ingredient strings in label order
                Example: ["Organic whole milk", "Vitamin D3", "E330"]
            contaminants: Contaminants measured in the product
            selected_allergens: User-selected allergen identifiers
                Example: ["dairy", "gluten"]

        Returns:
            List[ClassifiedIngredient]: One tagged ingredient per input.
                                        Empty list for empty input.

        Example:
            classifier = IngredientClassifier()
            tagged = classifier.classify_ingredients(
                ["organic milk", "sugar"], [], ["dairy"]
            )
            # tagged[0].tag == IngredientTag.ALLERGEN
        """
        if not ingredients:
            return []

        logger.info(f"Classifying {len(ingredients)} ingredient(s)")

        context = ClassificationContext(
            contaminants=tuple(contaminants or ()),
            selected_allergens=tuple(
                normalize_text(a) for a in (selected_allergens or ()) if normalize_text(a)
            ),
        )

        classified = [self.classify_ingredient(ingredient, context) for ingredient in ingredients]

        logger.info(f"Classification complete: {self.summarize(classified).counts}")
        return classified

    def classify_ingredient(
        self,
        ingredient: str,
        context: ClassificationContext
    ) -> ClassifiedIngredient:
        """
        Classify a single ingredient against the rule table.

        Args:
            ingredient: Raw ingredient text
            context: Contaminants and allergens for this product/user

        Returns:
            ClassifiedIngredient: First matching rule's result, or SAFE
        """
        name = (ingredient or "").strip()
        lowered = name.lower()

        for rule in self.rules:
            result = rule.apply(name, lowered, context)
            if result is not None:
                logger.debug(f"'{name}' tagged {result.tag.value} by rule '{rule.name}'")
                return result

        return ClassifiedIngredient(
            name=name,
            tag=IngredientTag.SAFE,
            risk="none",
            description="Generally safe ingredient",
        )

    def summarize(self, classified: List[ClassifiedIngredient]) -> ClassificationSummary:
        """
        Count classified ingredients per tag.

        Every tag appears in the counts, zero when absent, in precedence order.
        """
        counts: Dict[str, int] = {tag.value: 0 for tag in IngredientTag}
        for item in classified:
            counts[item.tag.value] += 1
        return ClassificationSummary(total=len(classified), counts=counts)
