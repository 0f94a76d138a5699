"""
Pydantic model for contaminant risk verdicts.
"""

from pydantic import BaseModel, Field
from typing import List, Literal


class RiskVerdict(BaseModel):
    """
    Overall qualitative risk of a product's contaminant list.

    Attributes:
        overall_risk: low / medium / high / critical
        risk_factors: One string per nonzero risk condition
        recommendations: Fixed advice for the risk tier
    """
    overall_risk: Literal["low", "medium", "high", "critical"]
    risk_factors: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "overall_risk": "critical",
                "risk_factors": [
                    "1 contaminant(s) exceed regulatory limits",
                    "Heavy metals present (1)"
                ],
                "recommendations": [
                    "Avoid this product - serious health risks detected",
                    "Consider reporting to local health authorities"
                ]
            }
        }
    }
