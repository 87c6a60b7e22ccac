"""HTTP client for the Central Portal Publisher API."""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from central_publisher.exceptions import ErrorResponse, InvalidCredentialsError, RegistryApiError
from central_publisher.modules.bundle.domain import PublicationCoordinates
from central_publisher.modules.deployment.domain import DeploymentStatus, PublishingType
from central_publisher.settings import Settings

PAYLOAD_TOO_LARGE = 413


def _is_json(response: httpx.Response) -> bool:
    content_type = response.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower() == "application/json"


class CentralPortalClient:
    """Upload bundles and manage deployments on the Publisher API."""

    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None) -> None:
        self.settings = settings
        self.base_url = settings.central_base_url.rstrip("/")
        self.log = logging.getLogger(self.__class__.__name__)
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=settings.central_http_timeout, verify=True)

    # ------------------------------------------------------------------ helpers
    def _auth_headers(self) -> Dict[str, str]:
        username = self.settings.central_username or ""
        password = self.settings.central_password or ""
        if not username.strip():
            raise InvalidCredentialsError("Central username must not be empty")
        if not password.strip():
            raise InvalidCredentialsError("Central password must not be empty")
        token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
        return {"Authorization": f"Bearer {token}"}

    def _deployment_url(self, deployment_id: str) -> str:
        return f"{self.base_url}/deployment/{quote(deployment_id, safe='')}"

    def _send(
        self,
        method: str,
        url: str,
        *,
        operation: str,
        deployment_id: Optional[str] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        headers = self._auth_headers()
        headers.update(kwargs.pop("headers", {}) or {})
        self.log.info("%s %s", method, url)
        try:
            response = self._client.request(method, url, headers=headers, **kwargs)
        except httpx.TransportError as exc:
            raise RegistryApiError(
                f"{operation} failed: {exc}",
                operation=operation,
                deployment_id=deployment_id,
            ) from exc
        self.log.debug("%s %s -> HTTP %s", method, url, response.status_code)
        return response

    def _error(
        self,
        response: httpx.Response,
        operation: str,
        deployment_id: Optional[str] = None,
    ) -> RegistryApiError:
        status = response.status_code
        if status == PAYLOAD_TOO_LARGE:
            return RegistryApiError(
                f"{operation} failed: Payload too large",
                status_code=status,
                operation=operation,
                deployment_id=deployment_id,
            )
        if _is_json(response) and response.content:
            try:
                payload = response.json()
            except ValueError as exc:
                error = RegistryApiError(
                    f"{operation} failed: unable to read error json (HTTP {status})",
                    status_code=status,
                    operation=operation,
                    deployment_id=deployment_id,
                )
                error.__cause__ = exc
                return error
            return RegistryApiError(
                f"{operation} failed: API responded with error",
                status_code=status,
                error=ErrorResponse.from_payload(payload, status),
                operation=operation,
                deployment_id=deployment_id,
            )
        return RegistryApiError(
            f"{operation} failed: API responded with HTTP code {status}",
            status_code=status,
            operation=operation,
            deployment_id=deployment_id,
        )

    # ------------------------------------------------------------------ operations
    def upload_bundle(
        self,
        archive: Path,
        publishing_type: PublishingType,
        coordinates: PublicationCoordinates,
    ) -> str:
        operation = f"Upload of bundle {archive.name} for {coordinates}"
        params = {"publishingType": publishing_type.value, "name": coordinates.coordinates}
        try:
            with archive.open("rb") as fh:
                response = self._send(
                    "POST",
                    f"{self.base_url}/upload",
                    operation=operation,
                    params=params,
                    files={"bundle": (archive.name, fh, "application/zip")},
                )
        except OSError as exc:
            raise RegistryApiError(f"{operation} failed: cannot read {archive}: {exc}", operation=operation) from exc
        if not response.is_success:
            raise self._error(response, operation)
        deployment_id = response.text.strip()
        if not deployment_id:
            raise RegistryApiError(
                f"{operation} failed: empty body received",
                status_code=response.status_code,
                operation=operation,
            )
        self.log.info("Uploaded %s as %s, deployment id %s", archive, coordinates, deployment_id)
        return deployment_id

    def get_deployment_status(self, deployment_id: str) -> Optional[DeploymentStatus]:
        """Return the server status, or ``None`` when the deployment is unknown (404)."""
        operation = f"Status request for deployment {deployment_id}"
        response = self._send(
            "POST",
            f"{self.base_url}/status",
            operation=operation,
            deployment_id=deployment_id,
            params={"id": deployment_id},
            content=b"",
            headers={"Content-Type": "application/json"},
        )
        if response.status_code == 404:
            self.log.info("Deployment %s not found on the portal", deployment_id)
            return None
        if not response.is_success:
            raise self._error(response, operation, deployment_id)
        try:
            status = DeploymentStatus.from_dict(response.json())
        except ValueError as exc:
            raise RegistryApiError(
                f"{operation} failed: unable to read returned status",
                status_code=response.status_code,
                operation=operation,
                deployment_id=deployment_id,
            ) from exc
        self.log.info("Deployment %s is %s", deployment_id, status.deployment_state.value)
        return status

    def publish_deployment(self, deployment_id: str) -> None:
        operation = f"Publish of deployment {deployment_id}"
        response = self._send(
            "POST",
            self._deployment_url(deployment_id),
            operation=operation,
            deployment_id=deployment_id,
        )
        if not response.is_success:
            raise self._error(response, operation, deployment_id)

    def drop_deployment(self, deployment_id: str) -> None:
        operation = f"Drop of deployment {deployment_id}"
        response = self._send(
            "DELETE",
            self._deployment_url(deployment_id),
            operation=operation,
            deployment_id=deployment_id,
        )
        if not response.is_success:
            raise self._error(response, operation, deployment_id)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "CentralPortalClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
