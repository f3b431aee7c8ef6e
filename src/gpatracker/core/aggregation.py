"""
Rolls a student's semester records into a cumulative standing.

Records are matched to a student by two rules, either of which is enough:

* the explicit ``studentId`` field equals the student id, or
* the row has no ``studentId`` and its storage key starts with
  ``"{student_id}_"``.

The second rule keeps rows written before the owner field existed visible.
It can go once those rows have been migrated to carry ``studentId``.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from gpatracker.core.gpa import calculate_cgpa
from gpatracker.core.models import (
    SEMESTERS,
    AggregateStanding,
    GradeStats,
    SemesterPoint,
    StoredRow,
    parse_semester,
    parse_sgpa,
)


@dataclass(frozen=True)
class SemesterResult:
    key: str
    semester: int
    sgpa: float


def owned_by_field(row: StoredRow, student_id: str) -> bool:
    return row.data.get("studentId") == student_id


def owned_by_key_prefix(row: StoredRow, student_id: str) -> bool:
    # an explicit owner always wins over the key
    if row.data.get("studentId"):
        return False
    return row.key.startswith(f"{student_id}_")


def owns_record(row: StoredRow, student_id: str) -> bool:
    if not student_id:
        return False
    return owned_by_field(row, student_id) or owned_by_key_prefix(row, student_id)


def select_records(rows: Iterable[StoredRow], student_id: str, batch: str) -> List[SemesterResult]:
    selected: List[SemesterResult] = []
    for row in rows:
        if not owns_record(row, student_id):
            continue
        if row.data.get("batch") != batch:
            continue
        sgpa = parse_sgpa(row.data.get("sgpa"))
        if sgpa is None or sgpa <= 0:
            continue
        semester = parse_semester(row.data.get("semester"))
        if semester is None:
            continue
        selected.append(SemesterResult(key=row.key, semester=semester, sgpa=sgpa))

    selected.sort(key=lambda result: result.semester)
    return selected


def build_series(results: Iterable[SemesterResult]) -> List[SemesterPoint]:
    by_semester = {}
    for result in results:
        by_semester[result.semester] = result.sgpa
    return [SemesterPoint(semester, by_semester.get(semester)) for semester in SEMESTERS]


def aggregate_standing(rows: Iterable[StoredRow], student_id: str, batch: str) -> AggregateStanding:
    results = select_records(rows, student_id, batch)
    cgpa: Optional[float] = calculate_cgpa([result.sgpa for result in results])
    return AggregateStanding(
        cgpa=cgpa,
        semester_series=build_series(results),
        based_on_count=len(results),
    )


def record_counts(rows: Iterable[StoredRow]) -> GradeStats:
    """Record count across the whole store, and per batch for rows that name one."""
    total = 0
    by_batch: Dict[str, int] = {}
    for row in rows:
        total += 1
        batch = row.data.get("batch")
        if batch:
            by_batch[str(batch)] = by_batch.get(str(batch), 0) + 1
    return GradeStats(total=total, by_batch=by_batch)
