"""Error taxonomy shared by the bundle and deployment modules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


class PublisherError(Exception):
    """Base class for every failure raised by the publisher core."""


class InvalidInputError(PublisherError, ValueError):
    """Raised when a required path or value is missing or malformed."""


class PublisherIOError(PublisherError, OSError):
    """Raised when a filesystem read or write fails."""


class UnsupportedAlgorithmError(PublisherError, ValueError):
    """Raised when a digest algorithm name is not recognised."""


class InvalidCredentialsError(PublisherError, ValueError):
    """Raised when the registry username or password is blank."""


class CorruptStoreError(PublisherError):
    """Raised when the persisted deployments file cannot be parsed."""


class DeploymentNotFoundError(PublisherError):
    """Raised when a deployment id is not present in the local store."""

    def __init__(self, deployment_id: str) -> None:
        super().__init__(f"No deployment with id {deployment_id} stored")
        self.deployment_id = deployment_id


@dataclass
class ErrorResponse:
    """Structured error body returned by the Publisher API."""

    http_status: int
    error_code: Any = None
    message: str = ""

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], status_code: int) -> "ErrorResponse":
        if not isinstance(payload, dict):
            return cls(http_status=status_code, message=str(payload))
        nested = payload.get("error")
        if isinstance(nested, dict):
            # the portal also answers {"error": {"message": "..."}}
            return cls(
                http_status=status_code,
                error_code=nested.get("code"),
                message=str(nested.get("message") or ""),
            )
        try:
            http_status = int(payload.get("httpStatus") or status_code)
        except (TypeError, ValueError):
            http_status = status_code
        return cls(
            http_status=http_status,
            error_code=payload.get("errorCode"),
            message=str(payload.get("message") or ""),
        )

    def __str__(self) -> str:
        return f"[HTTP {self.http_status}]({self.error_code}) - {self.message}"


class RegistryApiError(PublisherError):
    """Raised when a Publisher API call fails."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        error: Optional[ErrorResponse] = None,
        operation: Optional[str] = None,
        deployment_id: Optional[str] = None,
    ) -> None:
        text = f"{message}: {error}" if error else message
        super().__init__(text)
        self.status_code = status_code
        self.error = error
        self.operation = operation
        self.deployment_id = deployment_id
