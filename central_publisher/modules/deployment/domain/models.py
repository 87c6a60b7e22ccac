"""Dataclasses mirroring Publisher API deployments and the local store."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .enums import DeploymentState


def timestamp() -> str:
    """Current UTC instant as ISO-8601, e.g. ``2024-05-01T10:00:00.123Z``."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class DeploymentStatus:
    deployment_id: str
    deployment_name: str
    deployment_state: DeploymentState
    errors: Any = None
    purls: Optional[List[str]] = None

    @property
    def is_published(self) -> bool:
        return self.deployment_state is DeploymentState.PUBLISHED

    @property
    def is_failed(self) -> bool:
        return self.deployment_state is DeploymentState.FAILED

    @property
    def is_validated(self) -> bool:
        return self.deployment_state is DeploymentState.VALIDATED

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def with_state(self, state: DeploymentState) -> "DeploymentStatus":
        return replace(self, deployment_state=state)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "DeploymentStatus":
        if not isinstance(payload, dict):
            raise ValueError("deployment status must be a JSON object")
        try:
            deployment_id = payload["deploymentId"]
            state = DeploymentState(payload["deploymentState"])
        except KeyError as exc:
            raise ValueError(f"deployment status is missing {exc.args[0]}") from exc
        return cls(
            deployment_id=str(deployment_id),
            deployment_name=str(payload.get("deploymentName") or ""),
            deployment_state=state,
            errors=payload.get("errors"),
            purls=payload.get("purls"),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "deploymentId": self.deployment_id,
            "deploymentName": self.deployment_name,
            "deploymentState": self.deployment_state.value,
            "errors": self.errors,
        }
        if self.purls is not None:
            payload["purls"] = self.purls
        return payload


@dataclass(frozen=True)
class Deployment:
    id: str
    deployment: Optional[DeploymentStatus] = None
    timestamp: str = field(default_factory=timestamp)

    @classmethod
    def new(cls, deployment_id: str) -> "Deployment":
        return cls(id=deployment_id)

    @property
    def state(self) -> Optional[DeploymentState]:
        return self.deployment.deployment_state if self.deployment else None

    def updated(self, status: DeploymentStatus) -> "Deployment":
        return replace(self, deployment=status, timestamp=timestamp())

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Deployment":
        if not isinstance(payload, dict):
            raise ValueError("deployment entry must be a JSON object")
        status = payload.get("deployment")
        return cls(
            id=str(payload["id"]),
            deployment=DeploymentStatus.from_dict(status) if status is not None else None,
            timestamp=str(payload.get("timestamp") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "deployment": self.deployment.to_dict() if self.deployment else None,
            "timestamp": self.timestamp,
        }


@dataclass
class DeploymentsData:
    current: Dict[str, Deployment] = field(default_factory=dict)
    published: Dict[str, Deployment] = field(default_factory=dict)

    def get(self, deployment_id: str) -> Optional[Deployment]:
        return self.current.get(deployment_id) or self.published.get(deployment_id)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "DeploymentsData":
        if not isinstance(payload, dict):
            raise ValueError("deployments data must be a JSON object")

        def _section(name: str) -> Dict[str, Deployment]:
            raw = payload.get(name) or {}
            if not isinstance(raw, dict):
                raise ValueError(f"'{name}' must be a JSON object")
            return {key: Deployment.from_dict(value) for key, value in raw.items()}

        return cls(current=_section("current"), published=_section("published"))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": {key: value.to_dict() for key, value in self.current.items()},
            "published": {key: value.to_dict() for key, value in self.published.items()},
        }
