"""JSON file persistence for tracked deployments."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Optional

from central_publisher.exceptions import CorruptStoreError, PublisherIOError
from central_publisher.modules.deployment.domain import Deployment, DeploymentsData

DeploymentUpdate = Callable[[Optional[Deployment]], Optional[Deployment]]


class DeploymentStore:
    """Load-modify-save access to ``deployments.json``.

    Every mutating helper reloads the file first. There is no locking, so two
    processes sharing the file race and the last save wins.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.log = logging.getLogger(self.__class__.__name__)

    def load(self) -> DeploymentsData:
        if not self.path.exists():
            return DeploymentsData()
        try:
            raw = self.path.read_bytes()
        except OSError as exc:
            raise PublisherIOError(f"Failed to read deployments data from {self.path}: {exc}") from exc
        try:
            return DeploymentsData.from_dict(json.loads(raw.decode("utf-8")))
        except (ValueError, KeyError, TypeError) as exc:
            raise CorruptStoreError(f"Failed to read deployments data from {self.path}: {exc}") from exc

    def save(self, data: DeploymentsData) -> None:
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(data.to_dict(), indent=2), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as exc:
            raise PublisherIOError(f"Failed to save deployments data to {self.path}: {exc}") from exc
        self.log.debug(
            "Saved %d current / %d published deployment(s) to %s",
            len(data.current),
            len(data.published),
            self.path,
        )

    def get(self, deployment_id: str) -> Optional[Deployment]:
        return self.load().get(deployment_id)

    def put_current(self, deployment: Deployment) -> None:
        data = self.load()
        data.current[deployment.id] = deployment
        self.save(data)

    def remove_current(self, deployment_id: str) -> bool:
        data = self.load()
        if data.current.pop(deployment_id, None) is None:
            return False
        self.save(data)
        return True

    def update(self, deployment_id: str, action: DeploymentUpdate) -> Optional[Deployment]:
        data = self.load()
        result = action(data.current.get(deployment_id))
        if result is None:
            data.current.pop(deployment_id, None)
        else:
            data.current[deployment_id] = result
        self.save(data)
        return result
