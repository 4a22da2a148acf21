"""
docr-tools exceptions.

All errors raised by the client, the docker config decoder and the
resource lifecycle inherit from DocrToolsError.
"""

from __future__ import annotations

from http import HTTPStatus


class DocrToolsError(Exception):
    """Base exception for all docr-tools errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(DocrToolsError):
    """Raised when the provider configuration is incomplete or invalid."""
    pass


class DockerConfigError(DocrToolsError):
    """Raised when a Docker config JSON document cannot be decoded."""
    pass


class SchemaError(DocrToolsError):
    """Raised when an attribute value does not satisfy the resource schema."""
    pass


class CheckFailure(DocrToolsError):
    """Raised when an acceptance check fails."""
    pass


class DestroyError(DocrToolsError):
    """Raised when one or more resources could not be destroyed during teardown."""
    pass


class APIError(DocrToolsError):
    """Raised when the DigitalOcean API answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        error_id: str | None = None,
        request_id: str | None = None,
    ):
        super().__init__(
            message,
            details={
                "status_code": status_code,
                "error_id": error_id,
                "request_id": request_id,
            },
        )
        self.status_code = status_code
        self.error_id = error_id
        self.request_id = request_id

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == HTTPStatus.UNAUTHORIZED

    @property
    def is_not_found(self) -> bool:
        return self.status_code == HTTPStatus.NOT_FOUND

    def __str__(self) -> str:
        text = f"{self.status_code} {self.message}"
        if self.request_id:
            text += f" (request {self.request_id})"
        return text


class RevocationError(APIError):
    """Raised when a token could not be revoked."""
    pass
