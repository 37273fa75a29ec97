"""Error taxonomy for the ledger and trade lifecycle.

Services raise these; the HTTP layer maps each kind to a status code.
"""


class PaperFXError(Exception):
    """Base class for all PaperFX domain errors."""

    status_code = 500

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class ValidationError(PaperFXError):
    """Malformed or out-of-range input. The caller must fix the request.

    Shares 422 with FastAPI's request validation, so a bad field gets the
    same status whether the schema or a service rejects it.
    """

    status_code = 422


class ConflictError(PaperFXError):
    """The request collides with existing state (duplicate registration)."""

    status_code = 409


class NotFoundError(PaperFXError):
    """Unknown trade id, or a trade that is no longer open."""

    status_code = 404


class AuthenticationError(PaperFXError):
    """Bad credentials, or a missing, unknown or expired session token."""

    status_code = 401


class InvariantViolation(PaperFXError):
    """Internal consistency bug. Never expected in correct operation."""

    status_code = 500
