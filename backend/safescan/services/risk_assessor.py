"""
Contaminant risk assessment service.

Maps a product's contaminant list to a qualitative risk tier with the
conditions that triggered it and fixed advice for that tier.
"""

import logging
from typing import List

from safescan.models.product import Contaminant
from safescan.models.risk import RiskVerdict
from safescan.utils.constants import (
    HIGH_SEVERITY_THRESHOLD,
    MEDIUM_SEVERITY_THRESHOLD,
    NO_CONTAMINANTS_RECOMMENDATION,
    RISK_RECOMMENDATIONS,
)

# Configure logging
logger = logging.getLogger(__name__)


class ContaminantRiskAssessor:
    """
    Service class for rating the overall contaminant risk of a product.
    """

    def __init__(self):
        logger.info("ContaminantRiskAssessor initialized")

    def assess_contaminant_risk(self, contaminants: List[Contaminant]) -> RiskVerdict:
        """
        Assess the overall risk of a contaminant list.

        Tiers are evaluated top-down, first match wins:
        - critical: any contaminant exceeds its limit, or 2+ high-severity
        - high: any high-severity contaminant, or any PFAS
        - medium: any contaminant with severity >= 3
        - low: otherwise

        Args:
            contaminants: Contaminants measured in the product

        Returns:
            RiskVerdict: Tier, triggering factors and fixed recommendations
        """
        if not contaminants:
            logger.info("No contaminants supplied, risk is low")
            return RiskVerdict(
                overall_risk="low",
                risk_factors=[],
                recommendations=[NO_CONTAMINANTS_RECOMMENDATION],
            )

        high_severity = [c for c in contaminants if c.severity >= HIGH_SEVERITY_THRESHOLD]
        exceeds_limit = [c for c in contaminants if c.exceeds_limit]
        pfas_count = sum(1 for c in contaminants if c.category == "pfas")
        heavy_metal_count = sum(1 for c in contaminants if c.category == "heavy_metals")

        if exceeds_limit or len(high_severity) >= 2:
            overall_risk = "critical"
        elif high_severity or pfas_count > 0:
            overall_risk = "high"
        elif any(c.severity >= MEDIUM_SEVERITY_THRESHOLD for c in contaminants):
            overall_risk = "medium"
        else:
            overall_risk = "low"

        risk_factors: List[str] = []
        if exceeds_limit:
            risk_factors.append(f"{len(exceeds_limit)} contaminant(s) exceed regulatory limits")
        if pfas_count:
            risk_factors.append(f"PFAS compounds detected ({pfas_count})")
        if heavy_metal_count:
            risk_factors.append(f"Heavy metals present ({heavy_metal_count})")

        logger.info(
            f"Assessed {len(contaminants)} contaminant(s): {overall_risk} "
            f"(high severity: {len(high_severity)}, over limit: {len(exceeds_limit)})"
        )

        return RiskVerdict(
            overall_risk=overall_risk,
            risk_factors=risk_factors,
            recommendations=list(RISK_RECOMMENDATIONS[overall_risk]),
        )
