"""Error taxonomy shared by repositories and routes.

Every error carries the HTTP status it maps to; the exception handlers in
``restaurant_api.main`` render them as ``{"error": message}``.
"""


class ApiError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputValidationError(ApiError):
    """Malformed or missing required input."""

    status_code = 400


class InvalidIdentifier(ApiError):
    """An identifier failed the format check."""

    status_code = 400


class NotFound(ApiError):
    """A well-formed identifier matched no record."""

    status_code = 404


class UpstreamFailure(ApiError):
    """The database failed in a way the client cannot fix."""

    status_code = 500

    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(message)


def describe_validation_errors(errors: list[dict]) -> str:
    """Render pydantic error dicts as ``"field: reason; ..."``."""
    parts = []
    for error in errors:
        loc = [str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc)
        parts.append(f"{field}: {error['msg']}" if field else error["msg"])
    return "; ".join(parts) or "Invalid request"
