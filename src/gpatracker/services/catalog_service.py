import logging
from typing import Any, List, Optional, Tuple

from gpatracker.config.settings import Settings, settings
from gpatracker.core.models import Subject
from gpatracker.data.subjects import static_subjects
from gpatracker.services.firestore_client import GoogleAPIError, firestore_client

logger = logging.getLogger(__name__)


class SubjectCatalog:
    """
    Subjects per (batch, semester). The live catalog is a Firestore document
    per batch whose fields are semester numbers holding subject lists; when it
    is unreachable or empty the static table is used instead.
    """

    def __init__(self, client: Any = None, collection: str = "subjects") -> None:
        self.db = client
        self.collection = collection

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "SubjectCatalog":
        client = firestore_client(config.firebase_project_id) if config.firebase_project_id else None
        return cls(client, collection=config.subjects_collection)

    def list_subjects(self, batch: str, semester: int) -> Tuple[Subject, ...]:
        live = self._fetch_live(batch, semester)
        if live:
            return live
        return static_subjects(batch, semester)

    def _fetch_live(self, batch: str, semester: int) -> Optional[Tuple[Subject, ...]]:
        if self.db is None:
            return None
        try:
            snap = self.db.collection(self.collection).document(batch).get()
        except GoogleAPIError as exc:
            logger.warning("Subject catalog unavailable for %s sem %s, using static table: %s", batch, semester, exc)
            return None
        if not snap.exists:
            return None

        rows: Any = (snap.to_dict() or {}).get(str(semester))
        if isinstance(rows, dict):
            rows = [rows[k] for k in sorted(rows, key=lambda k: int(k) if str(k).isdigit() else 0)]
        if not isinstance(rows, list):
            return None

        subjects: List[Subject] = []
        for row in rows:
            if not isinstance(row, dict):
                continue
            try:
                subjects.append(Subject.from_dict(row))
            except (TypeError, ValueError):
                logger.warning("Skipping malformed subject row in %s sem %s: %r", batch, semester, row)
        return tuple(subjects) or None
