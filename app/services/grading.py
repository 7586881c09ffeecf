"""Letter-grade presentation helpers: progress fraction, colour and SVG arc."""

from __future__ import annotations

import math
from html import escape
from typing import Optional

from app.schemas import GradeScale, GradeView

GRADE_PROGRESS: dict[str, float] = {
    "F": 0,
    "D-": 0.1,
    "D": 0.2,
    "D+": 0.25,
    "C-": 0.3,
    "C": 0.4,
    "C+": 0.45,
    "B-": 0.5,
    "B": 0.6,
    "B+": 0.7,
    "A-": 0.8,
    "A": 0.9,
    "A+": 1,
}

NEUTRAL_COLOR = "#64748b"

# Checked in order against the upper-cased grade's first letter.
_GRADE_COLORS: tuple[tuple[str, str], ...] = (
    ("A", "#10b981"),
    ("B", "#f59e0b"),
    ("C", "#f97316"),
    ("D", "#ef4444"),
    ("F", "#dc2626"),
)

_ARC_RADIUS = 40
_ARC_STROKE = 8
_ARC_TRACK_COLOR = "#eee"
_CIRCUMFERENCE = 2 * math.pi * _ARC_RADIUS
_ARC_LENGTH = _CIRCUMFERENCE * 0.75  # 270 degrees
_ARC_OFFSET = _CIRCUMFERENCE * 0.125


def grade_progress(grade: Optional[str]) -> float:
    """Return the 0-1 progress for ``grade``; unknown grades map to 0."""
    if not isinstance(grade, str):
        return 0
    return GRADE_PROGRESS.get(grade, 0)


def grade_color(grade: Optional[str]) -> str:
    if not isinstance(grade, str) or not grade:
        return NEUTRAL_COLOR
    upper = grade.upper()
    for prefix, color in _GRADE_COLORS:
        if upper.startswith(prefix):
            return color
    return NEUTRAL_COLOR


def describe_grade(grade: str) -> GradeView:
    return GradeView(
        grade=grade,
        progress=grade_progress(grade),
        color=grade_color(grade),
    )


def grade_scale() -> GradeScale:
    """List every known grade from lowest to highest."""
    return GradeScale(grades=[describe_grade(grade) for grade in GRADE_PROGRESS])


def render_grade_arc(grade: str, size: int = 100) -> str:
    """Render the grade as a 270 degree progress arc in a 100x100 SVG viewBox."""
    progress = grade_progress(grade)
    color = grade_color(grade)
    dash_array = f"{_ARC_LENGTH:.3f} {_CIRCUMFERENCE:.3f}"
    dash_offset = _ARC_LENGTH * (1 - progress) + _ARC_OFFSET
    circle = (
        '<circle cx="50" cy="50" r="{r}" fill="none" stroke="{stroke}" '
        'stroke-width="{width}" stroke-dasharray="{dash_array}" '
        'stroke-dashoffset="{offset:.3f}" stroke-linecap="round" '
        'transform="rotate(-202.5 50 50)"/>'
    )
    track = circle.format(
        r=_ARC_RADIUS,
        stroke=_ARC_TRACK_COLOR,
        width=_ARC_STROKE,
        dash_array=dash_array,
        offset=_ARC_OFFSET,
    )
    bar = circle.format(
        r=_ARC_RADIUS,
        stroke=color,
        width=_ARC_STROKE,
        dash_array=dash_array,
        offset=dash_offset,
    )
    label = (
        f'<text x="50" y="56" text-anchor="middle" font-size="2.5em" '
        f'font-weight="bold" fill="{color}" dominant-baseline="middle">'
        f"{escape(grade)}</text>"
    )
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" '
        f'viewBox="0 0 100 100">{track}{bar}{label}</svg>'
    )


__all__ = [
    "GRADE_PROGRESS",
    "NEUTRAL_COLOR",
    "describe_grade",
    "grade_color",
    "grade_progress",
    "grade_scale",
    "render_grade_arc",
]
