from enum import Enum


class Reason(str, Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNCAUGHT_ERROR = "uncaught_error"
    CONFIGURATION_ERROR = "configuration_error"


class LibraryServiceError(Exception):
    """Base class for every failure the circulation service reports."""

    reason = Reason.UNCAUGHT_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(LibraryServiceError):
    reason = Reason.NOT_FOUND

    def __init__(self, kind: str, ident: object) -> None:
        super().__init__(f"{kind} not found: {ident}")
        self.kind = kind
        self.ident = ident


class Conflict(LibraryServiceError):
    reason = Reason.CONFLICT


class PersistenceFailure(LibraryServiceError):
    """The store rejected a write. Storage details stay in the log."""

    reason = Reason.UNCAUGHT_ERROR

    def __init__(self, message: str = "failed to persist changes") -> None:
        super().__init__(message)


class StatusNotRegistered(LibraryServiceError):
    reason = Reason.CONFIGURATION_ERROR

    def __init__(self, name: str) -> None:
        super().__init__(f"status not registered: {name}")
        self.name = name
