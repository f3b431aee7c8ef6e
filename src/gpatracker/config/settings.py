from dataclasses import dataclass
import logging
import os
from dotenv import load_dotenv


load_dotenv()


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    firebase_project_id: str = os.getenv("FIREBASE_PROJECT_ID", "")
    firebase_api_key: str = os.getenv("FIREBASE_API_KEY", "")

    record_store: str = os.getenv("RECORD_STORE", "firestore").strip().lower()
    sqlite_path: str = os.getenv("SQLITE_PATH", "gpatracker.db")

    grades_collection: str = os.getenv("GRADES_COLLECTION", "grades")
    subjects_collection: str = os.getenv("SUBJECTS_COLLECTION", "subjects")
    students_collection: str = os.getenv("STUDENTS_COLLECTION", "students")
    admins_collection: str = os.getenv("ADMINS_COLLECTION", "admins")

    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    cors_allowed_origins: tuple[str, ...] = _split_csv(
        os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
    )


settings = Settings()


def configure_logging(level: str = "") -> None:
    logging.basicConfig(
        level=(level or settings.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
