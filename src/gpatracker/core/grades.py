from dataclasses import dataclass
from typing import Any, Dict, Tuple

from gpatracker.core.errors import InvalidGrade


@dataclass(frozen=True)
class GradeOption:
    symbol: str
    point: int
    description: str


# Ten-point scale, best grade first.
GRADE_SCALE: Tuple[GradeOption, ...] = (
    GradeOption("O", 10, "Outstanding (91-100%)"),
    GradeOption("A+", 9, "Excellent (81-90%)"),
    GradeOption("A", 8, "Very Good (71-80%)"),
    GradeOption("B+", 7, "Good (61-70%)"),
    GradeOption("B", 6, "Average (56-60%)"),
    GradeOption("C", 5, "Satisfactory (50-55%)"),
    GradeOption("U", 0, "Failed (<50%)"),
)

_POINT_BY_SYMBOL: Dict[str, int] = {option.symbol: option.point for option in GRADE_SCALE}
VALID_POINTS = frozenset(_POINT_BY_SYMBOL.values())

MAX_GRADE_POINT = max(VALID_POINTS)


def grade_options() -> Tuple[GradeOption, ...]:
    return GRADE_SCALE


def to_grade_point(symbol: str) -> int:
    try:
        return _POINT_BY_SYMBOL[symbol.strip().upper()]
    except (KeyError, AttributeError) as exc:
        raise InvalidGrade(f"Unsupported grade symbol: {symbol!r}") from exc


def validate_grade_point(value: Any) -> int:
    """
    Accepts ints (and integral floats, as JSON clients send them) that sit on
    the scale. Anything else is rejected, including bools and numeric strings.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidGrade(f"Grade point must be a number, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidGrade(f"Grade point must be a whole number, got {value!r}")
        value = int(value)
    if value not in VALID_POINTS:
        allowed = ", ".join(str(p) for p in sorted(VALID_POINTS, reverse=True))
        raise InvalidGrade(f"Grade point {value} is not on the scale ({allowed})")
    return value
