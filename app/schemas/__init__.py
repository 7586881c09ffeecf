"""Public schema exports."""

from .investment import (
    UNKNOWN,
    AnalysisErrorResponse,
    GradeScale,
    GradeView,
    InvestmentRecord,
)

__all__ = [
    "UNKNOWN",
    "AnalysisErrorResponse",
    "GradeScale",
    "GradeView",
    "InvestmentRecord",
]
