from abc import ABC, abstractmethod
from datetime import datetime, timezone
import json
import logging
from pathlib import Path
import sqlite3
from typing import Any, Dict, List, Optional

from gpatracker.config.settings import Settings, settings
from gpatracker.core.errors import ConfigError, StoreUnavailable
from gpatracker.core.gpa import format_gpa
from gpatracker.core.models import GradeRecord, StoredRow, record_key, to_iso
from gpatracker.services.firestore_client import GoogleAPIError, firestore_client

logger = logging.getLogger(__name__)


class RecordStore(ABC):
    """
    Keyed store of semester records, one document per (student, batch, semester).

    fetch_all is a full scan; scan_count tracks how many were issued so
    callers can check they are not scanning more often than they mean to.
    """

    def __init__(self) -> None:
        self.scan_count = 0

    @abstractmethod
    def upsert(
        self,
        student_id: str,
        batch: str,
        semester: int,
        grades: Dict[str, int],
        sgpa: float,
    ) -> GradeRecord:
        ...

    @abstractmethod
    def fetch_one(self, student_id: str, batch: str, semester: int) -> Optional[GradeRecord]:
        ...

    def fetch_all(self) -> List[StoredRow]:
        self.scan_count += 1
        return self._scan()

    @abstractmethod
    def _scan(self) -> List[StoredRow]:
        ...

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def _document(
        student_id: str,
        batch: str,
        semester: int,
        grades: Dict[str, int],
        sgpa: float,
        created_at: str,
        updated_at: str,
    ) -> Dict[str, Any]:
        return {
            "studentId": student_id,
            "batch": batch,
            "semester": semester,
            "grades": {str(k): int(v) for k, v in grades.items()},
            "sgpa": format_gpa(sgpa),
            "createdAt": created_at,
            "updatedAt": updated_at,
        }


class SqliteRecordStore(RecordStore):
    def __init__(self, db_path: str = "gpatracker.db") -> None:
        super().__init__()
        self.db_path = db_path
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self._init_schema()

    def _init_schema(self) -> None:
        self.conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS grade_records (
              key TEXT PRIMARY KEY,
              student_id TEXT,
              batch TEXT NOT NULL,
              semester INTEGER NOT NULL,
              grades TEXT NOT NULL,
              sgpa TEXT NOT NULL,
              created_at TEXT NOT NULL,
              updated_at TEXT NOT NULL
            );
            """
        )
        self.conn.commit()

    def upsert(
        self,
        student_id: str,
        batch: str,
        semester: int,
        grades: Dict[str, int],
        sgpa: float,
    ) -> GradeRecord:
        key = record_key(student_id, batch, semester)
        now = to_iso(self._now())
        try:
            self.conn.execute(
                """INSERT INTO grade_records(key, student_id, batch, semester, grades, sgpa, created_at, updated_at)
                   VALUES(?,?,?,?,?,?,?,?)
                   ON CONFLICT(key) DO UPDATE SET
                       student_id=excluded.student_id,
                       grades=excluded.grades,
                       sgpa=excluded.sgpa,
                       updated_at=excluded.updated_at""",
                (key, student_id, batch, semester, json.dumps(grades), format_gpa(sgpa), now, now),
            )
            self.conn.commit()
        except sqlite3.Error as exc:
            raise StoreUnavailable(str(exc)) from exc

        stored = self.fetch_one(student_id, batch, semester)
        if stored is None:
            raise StoreUnavailable(f"Record {key} missing after write")
        return stored

    def fetch_one(self, student_id: str, batch: str, semester: int) -> Optional[GradeRecord]:
        key = record_key(student_id, batch, semester)
        try:
            cur = self.conn.execute("SELECT * FROM grade_records WHERE key=?", (key,))
            row = cur.fetchone()
        except sqlite3.Error as exc:
            raise StoreUnavailable(str(exc)) from exc
        if not row:
            return None
        return GradeRecord.from_wire(self._row_to_document(row), key=key)

    def _scan(self) -> List[StoredRow]:
        try:
            rows = self.conn.execute("SELECT * FROM grade_records").fetchall()
        except sqlite3.Error as exc:
            raise StoreUnavailable(str(exc)) from exc
        return [StoredRow(key=row["key"], data=self._row_to_document(row)) for row in rows]

    @staticmethod
    def _row_to_document(row: sqlite3.Row) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "batch": row["batch"],
            "semester": row["semester"],
            "grades": json.loads(row["grades"] or "{}"),
            "sgpa": row["sgpa"],
            "createdAt": row["created_at"],
            "updatedAt": row["updated_at"],
        }
        if row["student_id"]:
            data["studentId"] = row["student_id"]
        return data


class FirestoreRecordStore(RecordStore):
    def __init__(self, project_id: str, collection: str = "grades", client: Any = None) -> None:
        super().__init__()
        if client is None:
            client = firestore_client(project_id)
        self.db = client
        self.collection = collection

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "FirestoreRecordStore":
        return cls(config.firebase_project_id, collection=config.grades_collection)

    def _ref(self, key: str):
        return self.db.collection(self.collection).document(key)

    def upsert(
        self,
        student_id: str,
        batch: str,
        semester: int,
        grades: Dict[str, int],
        sgpa: float,
    ) -> GradeRecord:
        key = record_key(student_id, batch, semester)
        now = to_iso(self._now())
        ref = self._ref(key)
        try:
            snap = ref.get()
            previous = (snap.to_dict() or {}) if snap.exists else {}
            document = self._document(
                student_id,
                batch,
                semester,
                grades,
                sgpa,
                created_at=previous.get("createdAt") or now,
                updated_at=now,
            )
            # full overwrite, a merge would keep grades for positions no longer selected
            ref.set(document)
        except GoogleAPIError as exc:
            raise StoreUnavailable(str(exc)) from exc

        logger.debug("Upserted grade record %s", key)
        return GradeRecord.from_wire(document, key=key)

    def fetch_one(self, student_id: str, batch: str, semester: int) -> Optional[GradeRecord]:
        key = record_key(student_id, batch, semester)
        try:
            snap = self._ref(key).get()
        except GoogleAPIError as exc:
            raise StoreUnavailable(str(exc)) from exc
        if not snap.exists:
            return None
        return GradeRecord.from_wire(snap.to_dict() or {}, key=key)

    def _scan(self) -> List[StoredRow]:
        try:
            docs = list(self.db.collection(self.collection).stream())
        except GoogleAPIError as exc:
            raise StoreUnavailable(str(exc)) from exc
        return [StoredRow(key=doc.id, data=doc.to_dict() or {}) for doc in docs]


def build_record_store(config: Settings = settings) -> RecordStore:
    if config.record_store == "sqlite":
        return SqliteRecordStore(config.sqlite_path)
    if config.record_store == "firestore":
        return FirestoreRecordStore.from_settings(config)
    raise ConfigError(f"Unknown RECORD_STORE backend: {config.record_store!r}")
