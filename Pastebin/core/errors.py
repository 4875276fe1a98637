from __future__ import annotations


class PasteError(Exception):
    """Base class for failures that map onto an HTTP status."""

    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationError(PasteError):
    status_code = 400


class NotFoundError(PasteError):
    status_code = 404

    def __init__(self, detail: str = "Not found") -> None:
        super().__init__(detail)


class AuthorizationError(PasteError):
    status_code = 401

    def __init__(self, detail: str = "Unauthorized") -> None:
        super().__init__(detail)


class BackendError(PasteError):
    """A relational or object store operation failed; never retried."""

    status_code = 500
