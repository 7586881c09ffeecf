"""
Pydantic models for screenshot analysis responses and grade lookups.
"""

import json
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNKNOWN = "unknown"

ExtractedValue = Union[int, float, str]


class InvestmentRecord(BaseModel):
    """Structured description of one investment read from a screenshot.

    Values are kept as the model returned them. Missing or ``null`` fields are
    reported as ``"unknown"``; keys outside the schema are passed through.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: ExtractedValue = Field(UNKNOWN)
    type: ExtractedValue = Field(UNKNOWN)
    amount: ExtractedValue = Field(UNKNOWN)
    purchase_date: ExtractedValue = Field(UNKNOWN, alias="purchaseDate")
    quantity: ExtractedValue = Field(UNKNOWN)
    ticker: ExtractedValue = Field(UNKNOWN)
    risk_score: ExtractedValue = Field(
        UNKNOWN,
        alias="riskScore",
        description="Integer from 1 (lowest) to 10 (highest risk).",
    )
    grade: ExtractedValue = Field(UNKNOWN, description="Letter grade, F to A+.")
    roi_estimate: ExtractedValue = Field(
        UNKNOWN,
        alias="roiEstimate",
        description="Estimated return on investment as a percentage.",
    )

    @field_validator(
        "name",
        "type",
        "amount",
        "purchase_date",
        "quantity",
        "ticker",
        "risk_score",
        "grade",
        "roi_estimate",
        mode="before",
    )
    @classmethod
    def _fill_unknown(cls, value: Any) -> Any:
        if value is None:
            return UNKNOWN
        if isinstance(value, bool):
            return str(value).lower()
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        return value

    def to_response(self) -> dict[str, Any]:
        """Serialize with the camelCase keys browser clients consume."""
        return self.model_dump(by_alias=True)


class AnalysisErrorResponse(BaseModel):
    """Envelope returned when the analysis cannot be completed."""

    error: str
    details: Optional[str] = None


class GradeView(BaseModel):
    """Presentation values for a single letter grade."""

    grade: str
    progress: float = Field(..., ge=0, le=1)
    color: str


class GradeScale(BaseModel):
    """The ordered grade vocabulary with progress fractions."""

    grades: list[GradeView] = Field(default_factory=list)


__all__ = [
    "UNKNOWN",
    "AnalysisErrorResponse",
    "GradeScale",
    "GradeView",
    "InvestmentRecord",
]
