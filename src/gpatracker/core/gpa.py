from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Mapping, Optional, Sequence

from gpatracker.core.errors import InvalidGrade
from gpatracker.core.grades import MAX_GRADE_POINT, validate_grade_point
from gpatracker.core.models import Subject

# Subjects the student has not graded yet count as the top grade. This mirrors
# the calculator form, where every dropdown starts at "O".
DEFAULT_GRADE_POINT = MAX_GRADE_POINT


def round_half_up(value: float, places: int = 2) -> float:
    """
    Rounds the exact binary value of `value` with ties away from zero,
    matching JavaScript toFixed. 65/8 = 8.125 gives 8.13.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def normalize_selections(subjects: Sequence[Subject], selections: Mapping[Any, Any]) -> Dict[str, int]:
    """
    Validates grade selections keyed by subject position (0-based, int or str)
    and returns them keyed by the string position, as they are persisted.
    """
    normalized: Dict[str, int] = {}
    for raw_position, raw_point in selections.items():
        try:
            position = int(str(raw_position))
        except ValueError as exc:
            raise InvalidGrade(f"Unknown subject position: {raw_position!r}") from exc
        if position < 0 or position >= len(subjects):
            raise InvalidGrade(f"Subject position {position} is out of range")
        normalized[str(position)] = validate_grade_point(raw_point)
    return normalized


def calculate_sgpa(
    subjects: Sequence[Subject],
    selections: Mapping[Any, Any],
    *,
    round_to: int = 2,
) -> Optional[float]:
    """
    SGPA = Σ(grade_point * credits) / Σ(credits)

    Returns None when the subject list carries no credits, so that no record
    gets written for it.
    """
    grades = normalize_selections(subjects, selections)

    weighted_sum = 0.0
    total_credits = 0.0
    for position, subject in enumerate(subjects):
        if subject.credits < 0:
            raise ValueError(f"Subject {subject.code} has negative credits")
        grade_point = grades.get(str(position), DEFAULT_GRADE_POINT)
        weighted_sum += grade_point * subject.credits
        total_credits += subject.credits

    if total_credits == 0:
        return None

    return round_half_up(weighted_sum / total_credits, round_to)


def calculate_cgpa(sgpas: Sequence[float], *, round_to: int = 2) -> Optional[float]:
    """Unweighted mean of semester SGPAs."""
    if not sgpas:
        return None
    return round_half_up(sum(sgpas) / len(sgpas), round_to)


def format_gpa(value: float) -> str:
    return f"{round_half_up(value, 2):.2f}"
