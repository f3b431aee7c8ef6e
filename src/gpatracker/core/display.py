import math
from typing import Any, Optional

from gpatracker.core.gpa import round_half_up

PLACEHOLDER = "-"


def _positive(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) and number > 0 else None


def percentage(gpa: Any) -> str:
    number = _positive(gpa)
    if number is None:
        return PLACEHOLDER
    return f"{round_half_up(number * 10, 1):.1f}%"


def format_cgpa(cgpa: Any) -> str:
    number = _positive(cgpa)
    if number is None:
        return PLACEHOLDER
    return f"{round_half_up(number, 2):.2f}"


def based_on_label(count: int) -> str:
    if count <= 0:
        return "Calculate your first semester to see CGPA"
    return f"Based on {count} semester{'s' if count > 1 else ''}"
