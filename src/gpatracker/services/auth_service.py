from dataclasses import dataclass
import logging
from typing import Any, Dict, Optional
import requests
from requests import RequestException

from gpatracker.config.settings import Settings, settings
from gpatracker.core.access import Identity, Role
from gpatracker.core.errors import GpaTrackerError
from gpatracker.services.firestore_client import GoogleAPIError, firestore_client

logger = logging.getLogger(__name__)


class AuthServiceError(GpaTrackerError):
    pass


@dataclass
class AuthResult:
    uid: str
    email: str
    id_token: str
    refresh_token: str


class FirebaseAuthService:
    SIGN_IN_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"

    def __init__(self, api_key: str, session: Optional[requests.Session] = None) -> None:
        if not api_key:
            raise AuthServiceError("Missing FIREBASE_API_KEY in environment")
        self.api_key = api_key
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "FirebaseAuthService":
        return cls(config.firebase_api_key)

    def sign_in(self, email: str, password: str) -> AuthResult:
        payload = {
            "email": email,
            "password": password,
            "returnSecureToken": True,
        }
        data = self._post(self.SIGN_IN_URL, payload)
        uid = str(data.get("localId") or "")
        if not uid:
            raise AuthServiceError("INVALID_FIREBASE_SESSION")
        return AuthResult(
            uid=uid,
            email=str(data.get("email") or email),
            id_token=str(data.get("idToken") or ""),
            refresh_token=str(data.get("refreshToken") or ""),
        )

    def _post(self, url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            res = self.session.post(url, params={"key": self.api_key}, json=payload, timeout=15)
        except RequestException as exc:
            raise AuthServiceError("AUTH_SERVICE_UNAVAILABLE") from exc
        try:
            data = res.json()
        except ValueError as exc:
            raise AuthServiceError("AUTH_SERVICE_UNAVAILABLE") from exc

        if res.status_code >= 400:
            error = data.get("error") or {}
            raise AuthServiceError(str(error.get("message") or "AUTH_ERROR"))

        return data


class ProfileDirectory:
    """Resolves an identity id to its role and profile fields."""

    def __init__(self, client: Any, students_collection: str = "students", admins_collection: str = "admins") -> None:
        self.db = client
        self.students_collection = students_collection
        self.admins_collection = admins_collection

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "ProfileDirectory":
        return cls(
            firestore_client(config.firebase_project_id),
            students_collection=config.students_collection,
            admins_collection=config.admins_collection,
        )

    def _get(self, collection: str, uid: str) -> Dict[str, Any]:
        try:
            snap = self.db.collection(collection).document(uid).get()
        except GoogleAPIError as exc:
            raise AuthServiceError("PROFILE_SERVICE_UNAVAILABLE") from exc
        if not snap.exists:
            return {}
        return snap.to_dict() or {}

    def resolve(self, uid: str) -> Optional[Identity]:
        if not uid:
            return None

        admin = self._get(self.admins_collection, uid)
        if admin:
            role = str(admin.get("role", ""))
            # year_admin is the old name for batch_admin
            if role == "year_admin":
                role = Role.BATCH_ADMIN.value
            try:
                return Identity(
                    identity_id=uid,
                    role=Role(role),
                    assigned_batch=admin.get("batch") or admin.get("assignedBatch"),
                    regulation=admin.get("regulation"),
                )
            except ValueError:
                logger.warning("Admin profile %s has unknown role %r", uid, role)
                return None

        student = self._get(self.students_collection, uid)
        if student:
            return Identity(
                identity_id=uid,
                role=Role.STUDENT,
                assigned_batch=student.get("batch"),
                regulation=student.get("regulation"),
            )

        return None
