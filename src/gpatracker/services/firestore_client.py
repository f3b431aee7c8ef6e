try:
    from google.api_core.exceptions import GoogleAPIError
    from google.cloud import firestore
except ModuleNotFoundError as exc:
    raise ModuleNotFoundError(
        "Missing dependency 'google-cloud-firestore'. Install the project with pip install -e ."
    ) from exc

from gpatracker.core.errors import ConfigError

__all__ = ["GoogleAPIError", "firestore_client"]


def firestore_client(project_id: str) -> "firestore.Client":
    if not project_id:
        raise ConfigError("Missing FIREBASE_PROJECT_ID in environment")
    return firestore.Client(project=project_id)
