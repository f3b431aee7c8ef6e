from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from gpatracker.config.settings import configure_logging, settings
from gpatracker.core.access import Identity
from gpatracker.core.display import based_on_label, format_cgpa, percentage
from gpatracker.core.errors import AccessDenied, DenyReason, InvalidGrade, NoSubjects, StoreUnavailable
from gpatracker.core.gpa import format_gpa
from gpatracker.core.grades import grade_options
from gpatracker.core.models import MAX_SEMESTER, MIN_SEMESTER, AggregateStanding
from gpatracker.data.subjects import available_batches, available_semesters
from gpatracker.services.auth_service import AuthServiceError, FirebaseAuthService, ProfileDirectory
from gpatracker.services.catalog_service import SubjectCatalog
from gpatracker.services.gradebook_service import GradebookService
from gpatracker.services.notification_service import CollectingNotifier
from gpatracker.services.record_store import build_record_store


configure_logging()

app = FastAPI(title="GPA Tracker API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class AuthPayload(BaseModel):
    email: str
    password: str


class GradesPayload(BaseModel):
    grades: Dict[str, Any] = Field(default_factory=dict)


def get_catalog() -> SubjectCatalog:
    return SubjectCatalog.from_settings()


def get_gradebook(catalog: SubjectCatalog = Depends(get_catalog)) -> GradebookService:
    return GradebookService(build_record_store(), catalog, CollectingNotifier())


def get_profiles() -> ProfileDirectory:
    return ProfileDirectory.from_settings()


def get_auth() -> FirebaseAuthService:
    return FirebaseAuthService.from_settings()


def current_identity(
    x_user_id: Optional[str] = Header(default=None),
    profiles: ProfileDirectory = Depends(get_profiles),
) -> Identity:
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing x-user-id header")
    try:
        identity = profiles.resolve(x_user_id)
    except AuthServiceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    if identity is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=DenyReason.NOT_AUTHENTICATED.value)
    return identity


def _semester(semester: int) -> int:
    if not MIN_SEMESTER <= semester <= MAX_SEMESTER:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Semester must be between {MIN_SEMESTER} and {MAX_SEMESTER}",
        )
    return semester


def _denied(exc: AccessDenied) -> HTTPException:
    code = (
        status.HTTP_401_UNAUTHORIZED
        if exc.reason is DenyReason.NOT_AUTHENTICATED
        else status.HTTP_403_FORBIDDEN
    )
    return HTTPException(status_code=code, detail=exc.reason.value)


def _standing_payload(standing: AggregateStanding) -> Dict:
    payload = standing.to_dict()
    payload["cgpa_display"] = format_cgpa(standing.cgpa)
    payload["percentage"] = percentage(standing.cgpa)
    payload["based_on"] = based_on_label(standing.based_on_count)
    return payload


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/auth/login")
def login(payload: AuthPayload, auth: FirebaseAuthService = Depends(get_auth)) -> Dict:
    try:
        result = auth.sign_in(payload.email, payload.password)
        return {
            "uid": result.uid,
            "email": result.email,
            "id_token": result.id_token,
            "refresh_token": result.refresh_token,
        }
    except AuthServiceError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc


@app.get("/grade-scale")
def grade_scale() -> List[Dict]:
    return [
        {"symbol": option.symbol, "point": option.point, "description": option.description}
        for option in grade_options()
    ]


@app.get("/catalog/batches")
def list_batches(regulation: Optional[str] = None) -> List[str]:
    return list(available_batches(regulation))


@app.get("/catalog/{batch}/semesters")
def list_semesters(batch: str) -> List[int]:
    return list(available_semesters(batch))


@app.get("/catalog/{batch}/{semester}")
def list_subjects(batch: str, semester: int, catalog: SubjectCatalog = Depends(get_catalog)) -> List[Dict]:
    return [subject.to_dict() for subject in catalog.list_subjects(batch, _semester(semester))]


@app.get("/grades/{batch}/{semester}")
def get_semester(
    batch: str,
    semester: int,
    caller: Identity = Depends(current_identity),
    gradebook: GradebookService = Depends(get_gradebook),
) -> Dict:
    try:
        rows, record = gradebook.semester_view(caller, caller.identity_id, batch, _semester(semester))
    except AccessDenied as exc:
        raise _denied(exc) from exc
    except StoreUnavailable as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return {
        "subjects": [
            {
                **row.subject.to_dict(),
                "position": row.position,
                "grade_point": row.grade_point,
                "graded": row.graded,
            }
            for row in rows
        ],
        "record": record.to_wire() if record else None,
    }


@app.post("/grades/{batch}/{semester}")
def save_semester(
    batch: str,
    semester: int,
    payload: GradesPayload,
    caller: Identity = Depends(current_identity),
    gradebook: GradebookService = Depends(get_gradebook),
) -> Dict:
    try:
        outcome = gradebook.compute_and_save(caller, batch, _semester(semester), payload.grades)
    except InvalidGrade as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except NoSubjects as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except AccessDenied as exc:
        raise _denied(exc) from exc

    notifier = gradebook.notifier
    messages = getattr(notifier, "messages", [])
    return {
        "sgpa": format_gpa(outcome.sgpa),
        "percentage": percentage(outcome.sgpa),
        "saved": outcome.saved,
        "error": outcome.error,
        "record": outcome.record.to_wire() if outcome.record else None,
        "standing": _standing_payload(outcome.standing),
        "notifications": [{"message": message, "kind": kind.value} for message, kind in messages],
    }


@app.get("/standing/{batch}")
def own_standing(
    batch: str,
    caller: Identity = Depends(current_identity),
    gradebook: GradebookService = Depends(get_gradebook),
) -> Dict:
    try:
        return _standing_payload(gradebook.standing(caller, caller.identity_id, batch))
    except AccessDenied as exc:
        raise _denied(exc) from exc


@app.get("/students/{student_id}/standing/{batch}")
def student_standing(
    student_id: str,
    batch: str,
    caller: Identity = Depends(current_identity),
    gradebook: GradebookService = Depends(get_gradebook),
) -> Dict:
    try:
        return _standing_payload(gradebook.standing(caller, student_id, batch))
    except AccessDenied as exc:
        raise _denied(exc) from exc


@app.get("/admin/grade-stats")
def admin_grade_stats(
    caller: Identity = Depends(current_identity),
    gradebook: GradebookService = Depends(get_gradebook),
) -> Dict:
    try:
        return gradebook.grade_stats(caller).to_dict()
    except AccessDenied as exc:
        raise _denied(exc) from exc
    except StoreUnavailable as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
