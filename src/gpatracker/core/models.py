from dataclasses import dataclass, field
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

MIN_SEMESTER = 1
MAX_SEMESTER = 8
SEMESTERS: Tuple[int, ...] = tuple(range(MIN_SEMESTER, MAX_SEMESTER + 1))


@dataclass(frozen=True)
class Subject:
    code: str
    name: str
    credits: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Subject":
        return cls(
            code=str(data.get("code", "")),
            name=str(data.get("name", "")),
            credits=float(data.get("credits", 0) or 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        credits = int(self.credits) if float(self.credits).is_integer() else self.credits
        return {"code": self.code, "name": self.name, "credits": credits}


def record_key(student_id: str, batch: str, semester: int) -> str:
    return f"{student_id}_{batch}_{semester}"


def to_iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def from_iso(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # legacy rows stored epoch milliseconds
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def parse_sgpa(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def parse_grades(value: Any) -> Dict[str, int]:
    """Stored grades by position; entries that are not whole numbers are dropped."""
    if isinstance(value, list):
        # positional arrays come back from stores that collapse "0".."n" keys
        value = dict(enumerate(value))
    if not isinstance(value, Mapping):
        return {}
    grades: Dict[str, int] = {}
    for position, point in value.items():
        if isinstance(point, bool):
            continue
        try:
            number = float(point)
        except (TypeError, ValueError):
            continue
        if math.isfinite(number) and number.is_integer():
            grades[str(position)] = int(number)
    return grades


def parse_semester(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class GradeRecord:
    student_id: str
    batch: str
    semester: int
    grades: Dict[str, int]
    sgpa: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def key(self) -> str:
        return record_key(self.student_id, self.batch, self.semester)

    def to_wire(self) -> Dict[str, Any]:
        return {
            "studentId": self.student_id,
            "batch": self.batch,
            "semester": self.semester,
            "grades": dict(self.grades),
            "sgpa": f"{self.sgpa:.2f}",
            "createdAt": to_iso(self.created_at) if self.created_at else None,
            "updatedAt": to_iso(self.updated_at) if self.updated_at else None,
        }

    @classmethod
    def from_wire(cls, data: Mapping[str, Any], key: str = "") -> "GradeRecord":
        semester = parse_semester(data.get("semester"))
        if semester is None:
            raise ValueError(f"Record {key or '?'} has no valid semester")
        return cls(
            student_id=str(data.get("studentId") or ""),
            batch=str(data.get("batch", "")),
            semester=semester,
            grades=parse_grades(data.get("grades")),
            sgpa=parse_sgpa(data.get("sgpa")) or 0.0,
            created_at=from_iso(data.get("createdAt")),
            updated_at=from_iso(data.get("updatedAt")),
        )


@dataclass(frozen=True)
class StoredRow:
    """A raw document from a full store scan, with the key it was stored under."""

    key: str
    data: Dict[str, Any]


@dataclass(frozen=True)
class SemesterPoint:
    semester: int
    sgpa: Optional[float]


@dataclass(frozen=True)
class AggregateStanding:
    cgpa: Optional[float] = None
    semester_series: List[SemesterPoint] = field(
        default_factory=lambda: [SemesterPoint(s, None) for s in SEMESTERS]
    )
    based_on_count: int = 0

    @classmethod
    def empty(cls) -> "AggregateStanding":
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cgpa": self.cgpa,
            "semester_series": [
                {"semester": point.semester, "sgpa": point.sgpa} for point in self.semester_series
            ],
            "based_on_count": self.based_on_count,
        }


@dataclass(frozen=True)
class GradeStats:
    total: int = 0
    by_batch: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"total": self.total, "by_batch": dict(self.by_batch)}
