"""Error taxonomy shared by the services and the HTTP layer.

Every error a request can end with derives from ``GatewayError`` and knows
its HTTP status. The exception handler in ``gateway.main`` renders them as
``{"error": message, ...extra}``.
"""

from dataclasses import asdict, dataclass
from typing import Any


class GatewayError(Exception):
    """Base class for errors that map directly to a client response."""

    status_code: int = 500
    message: str = "Internal server error."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_content(self) -> dict[str, Any]:
        return {"error": self.message}


class MissingCredential(GatewayError):
    status_code = 401
    message = "Authorization token missing."


class InvalidCredentials(GatewayError):
    status_code = 401
    message = "Invalid credentials."


class InvalidOrExpiredToken(GatewayError):
    status_code = 401
    message = "Invalid or expired token."


class BadRequest(GatewayError):
    status_code = 400
    message = "Invalid request."


@dataclass(frozen=True)
class ValidationIssue:
    """A single rule violation on one payload field."""

    field: str
    rule: str
    message: str


class ValidationFailed(GatewayError):
    status_code = 400
    message = "Invalid blog payload."

    def __init__(self, issues: list[ValidationIssue]) -> None:
        super().__init__()
        self.issues = issues

    def to_content(self) -> dict[str, Any]:
        return {"error": self.message, "issues": [asdict(i) for i in self.issues]}


class SlugConflict(GatewayError):
    status_code = 409
    message = "A post with this slug already exists."

    def __init__(self, slug: str) -> None:
        super().__init__()
        self.slug = slug

    def to_content(self) -> dict[str, Any]:
        return {"error": self.message, "slug": self.slug}


class PostNotFound(GatewayError):
    status_code = 404
    message = "Blog post not found."

    def __init__(self, slug: str) -> None:
        super().__init__()
        self.slug = slug


class PersistenceFailed(GatewayError):
    """Unexpected store failure. Details are logged, never returned."""

    status_code = 500
    message = "Content store error."


class RepositoryError(Exception):
    """Raised by repositories when the underlying store fails."""


class DuplicateKeyError(RepositoryError):
    """Raised by ``insert_unique`` when the slug is already taken."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Duplicate slug: {slug}")
        self.slug = slug
