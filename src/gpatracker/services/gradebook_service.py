from dataclasses import dataclass, field
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from gpatracker.core.access import Identity, Operation, Target, require
from gpatracker.core.aggregation import aggregate_standing, record_counts
from gpatracker.core.errors import NoSubjects, StoreUnavailable
from gpatracker.core.gpa import DEFAULT_GRADE_POINT, calculate_sgpa, normalize_selections
from gpatracker.core.models import (
    MAX_SEMESTER,
    MIN_SEMESTER,
    AggregateStanding,
    GradeRecord,
    GradeStats,
    Subject,
)
from gpatracker.services.catalog_service import SubjectCatalog
from gpatracker.services.notification_service import LogNotifier, NotificationKind, Notifier
from gpatracker.services.record_store import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class SaveOutcome:
    sgpa: float
    saved: bool
    record: Optional[GradeRecord] = None
    standing: AggregateStanding = field(default_factory=AggregateStanding.empty)
    error: Optional[str] = None


@dataclass(frozen=True)
class SubjectGrade:
    position: int
    subject: Subject
    grade_point: int
    graded: bool


class GradebookService:
    """Compute, save and roll up semester results for one caller at a time."""

    def __init__(self, store: RecordStore, catalog: SubjectCatalog, notifier: Optional[Notifier] = None) -> None:
        self.store = store
        self.catalog = catalog
        self.notifier = notifier or LogNotifier()

    def _notify(self, message: str, kind: NotificationKind) -> None:
        try:
            self.notifier.notify(message, kind)
        except Exception:
            logger.exception("Notifier failed for message %r", message)

    @staticmethod
    def _check_semester(semester: int) -> None:
        if not MIN_SEMESTER <= semester <= MAX_SEMESTER:
            raise ValueError(f"Semester must be between {MIN_SEMESTER} and {MAX_SEMESTER}")

    def compute(self, batch: str, semester: int, selections: Mapping[Any, Any]) -> Tuple[Tuple[Subject, ...], Dict[str, int], float]:
        self._check_semester(semester)
        subjects = self.catalog.list_subjects(batch, semester)
        grades = normalize_selections(subjects, selections)
        sgpa = calculate_sgpa(subjects, grades)
        if sgpa is None:
            raise NoSubjects(f"No credited subjects for batch {batch} semester {semester}")
        return subjects, grades, sgpa

    def compute_and_save(
        self,
        caller: Optional[Identity],
        batch: str,
        semester: int,
        selections: Mapping[Any, Any],
        student_id: Optional[str] = None,
    ) -> SaveOutcome:
        """
        Returns the computed SGPA even when the save fails; `saved` tells the
        two apart. Raises InvalidGrade, NoSubjects or AccessDenied before any
        write is attempted.
        """
        _, grades, sgpa = self.compute(batch, semester, selections)

        if student_id is None:
            student_id = caller.identity_id if caller else ""
        require(caller, Operation.WRITE_RECORD, Target(student_id=student_id, batch=batch))

        try:
            record = self.store.upsert(student_id, batch, semester, grades, sgpa)
        except StoreUnavailable as exc:
            logger.warning("Save failed for %s/%s/%s: %s", student_id, batch, semester, exc)
            self._notify("Calculated but failed to save. Try again.", NotificationKind.ERROR)
            return SaveOutcome(
                sgpa=sgpa,
                saved=False,
                standing=self._standing_or_empty(student_id, batch),
                error=str(exc),
            )

        self._notify("Grades saved successfully!", NotificationKind.SUCCESS)
        return SaveOutcome(
            sgpa=sgpa,
            saved=True,
            record=record,
            standing=self._standing_or_empty(student_id, batch),
        )

    def load_semester(
        self,
        caller: Optional[Identity],
        student_id: str,
        batch: str,
        semester: int,
    ) -> Optional[GradeRecord]:
        require(caller, Operation.READ_RECORDS, Target(student_id=student_id, batch=batch))
        return self.store.fetch_one(student_id, batch, semester)

    def semester_view(
        self,
        caller: Optional[Identity],
        student_id: str,
        batch: str,
        semester: int,
    ) -> Tuple[List[SubjectGrade], Optional[GradeRecord]]:
        self._check_semester(semester)
        record = self.load_semester(caller, student_id, batch, semester)
        subjects = self.catalog.list_subjects(batch, semester)
        stored = record.grades if record else {}
        rows = [
            SubjectGrade(
                position=position,
                subject=subject,
                grade_point=stored.get(str(position), DEFAULT_GRADE_POINT),
                graded=str(position) in stored,
            )
            for position, subject in enumerate(subjects)
        ]
        return rows, record

    def standing(self, caller: Optional[Identity], student_id: str, batch: str) -> AggregateStanding:
        require(caller, Operation.READ_RECORDS, Target(student_id=student_id, batch=batch))
        return self._standing_or_empty(student_id, batch)

    def grade_stats(self, caller: Optional[Identity]) -> GradeStats:
        """Store-wide record counts for the analytics dashboard. StoreUnavailable propagates."""
        require(caller, Operation.READ_STATS, Target(student_id=""))
        return record_counts(self.store.fetch_all())

    def _standing_or_empty(self, student_id: str, batch: str) -> AggregateStanding:
        try:
            rows = self.store.fetch_all()
        except StoreUnavailable as exc:
            logger.warning("Could not aggregate %s/%s: %s", student_id, batch, exc)
            return AggregateStanding.empty()
        return aggregate_standing(rows, student_id, batch)
