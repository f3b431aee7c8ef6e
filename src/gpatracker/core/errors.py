from enum import Enum


class GpaTrackerError(Exception):
    pass


class ConfigError(GpaTrackerError):
    pass


class InvalidGrade(GpaTrackerError):
    pass


class NoSubjects(GpaTrackerError):
    pass


class StoreUnavailable(GpaTrackerError):
    pass


class DenyReason(str, Enum):
    NOT_AUTHENTICATED = "NotAuthenticated"
    NOT_OWNER = "NotOwner"
    OUT_OF_SCOPE = "OutOfScope"


class AccessDenied(GpaTrackerError):
    def __init__(self, reason: DenyReason, detail: str = "") -> None:
        super().__init__(detail or reason.value)
        self.reason = reason
