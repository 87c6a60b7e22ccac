"""Deployment lifecycle: record uploads and reconcile them with the portal."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from central_publisher.exceptions import DeploymentNotFoundError, InvalidInputError
from central_publisher.modules.bundle.domain import PublicationCoordinates
from central_publisher.modules.deployment.client import CentralPortalClient
from central_publisher.modules.deployment.domain import (
    Deployment,
    DeploymentsData,
    DeploymentState,
    DeploymentStatus,
    PublishingType,
)
from central_publisher.modules.deployment.repositories import DeploymentStore


def _require_id(deployment_id: Optional[str]) -> str:
    if deployment_id is None or not deployment_id.strip():
        raise InvalidInputError("Blank or no deploymentId is passed")
    return deployment_id.strip()


class DeploymentLifecycleService:
    """Tracks uploaded deployments in the local store.

    Batch operations load the store once, walk ``current`` in stored order and
    save once at the end. The first failing portal call aborts the batch and
    nothing from that batch is persisted.
    """

    def __init__(self, client: CentralPortalClient, store: DeploymentStore) -> None:
        self.client = client
        self.store = store
        self.log = logging.getLogger(self.__class__.__name__)

    def upload(
        self,
        archive: Path,
        publishing_type: PublishingType,
        coordinates: PublicationCoordinates,
    ) -> Deployment:
        deployment_id = self.client.upload_bundle(archive, publishing_type, coordinates)
        deployment = Deployment.new(deployment_id)
        self.store.put_current(deployment)
        self.log.info("Recorded deployment %s for %s (%s)", deployment_id, coordinates, publishing_type.value)
        return deployment

    def fetch_status(self, deployment_id: str) -> Optional[DeploymentStatus]:
        return self.client.get_deployment_status(_require_id(deployment_id))

    def get_deployment(self, deployment_id: str) -> Deployment:
        deployment = self.store.get(_require_id(deployment_id))
        if deployment is None:
            raise DeploymentNotFoundError(deployment_id)
        return deployment

    # ------------------------------------------------------------------ refresh
    def _refresh(self, data: DeploymentsData, only_id: Optional[str] = None) -> int:
        visited = 0
        for deployment in list(data.current.values()):
            if only_id is not None and deployment.id != only_id:
                continue
            visited += 1
            status = self.client.get_deployment_status(deployment.id)
            if status is None:
                self.log.info("Deployment %s no longer exists, forgetting it", deployment.id)
                data.current.pop(deployment.id, None)
                data.published.pop(deployment.id, None)
            elif status.is_published:
                self.log.info("Deployment %s is published", deployment.id)
                data.current.pop(deployment.id, None)
                data.published[deployment.id] = deployment.updated(status)
            else:
                data.current[deployment.id] = deployment.updated(status)
        return visited

    def check_deployments(self, deployment_id: Optional[str] = None) -> DeploymentsData:
        only_id = _require_id(deployment_id) if deployment_id is not None else None
        data = self.store.load()
        if only_id:
            self.log.info("Fetching and updating deployment %s..", only_id)
        else:
            self.log.info("Fetching and updating %d deployment(s)..", len(data.current))
        if self._refresh(data, only_id):
            self.store.save(data)
        return data

    # ------------------------------------------------------------------ single deployment
    def drop_deployment(self, deployment_id: str) -> None:
        deployment_id = _require_id(deployment_id)
        self.log.info("Dropping deployment %s ...", deployment_id)
        self.client.drop_deployment(deployment_id)
        self.store.remove_current(deployment_id)
        self.log.info("Deployment %s dropped", deployment_id)

    def publish_deployment(self, deployment_id: str) -> Optional[Deployment]:
        deployment_id = _require_id(deployment_id)
        self.log.info("Publishing deployment %s ...", deployment_id)
        self.client.publish_deployment(deployment_id)

        def _mark_publishing(current: Optional[Deployment]) -> Optional[Deployment]:
            if current is None or current.deployment is None:
                return current
            return current.updated(current.deployment.with_state(DeploymentState.PUBLISHING))

        if self.store.get(deployment_id) is None:
            self.log.info("Deployment %s is not tracked locally, nothing to update", deployment_id)
            return None
        return self.store.update(deployment_id, _mark_publishing)

    # ------------------------------------------------------------------ batches
    def drop_failed(self, refresh: bool = False) -> List[str]:
        data = self.store.load()
        changed = bool(refresh and self._refresh(data))
        dropped: List[str] = []
        for deployment in list(data.current.values()):
            if deployment.deployment is None or not deployment.deployment.is_failed:
                continue
            self.client.drop_deployment(deployment.id)
            data.current.pop(deployment.id)
            dropped.append(deployment.id)
        self.log.info(
            "Dropped %d failed deployment(s), %d remaining",
            len(dropped),
            len(data.current),
        )
        if changed or dropped:
            self.store.save(data)
        return dropped

    def publish_validated(self, refresh: bool = False) -> List[str]:
        data = self.store.load()
        changed = bool(refresh and self._refresh(data))
        published: List[str] = []
        for deployment in list(data.current.values()):
            status = deployment.deployment
            if status is None or not status.is_validated:
                continue
            self.client.publish_deployment(deployment.id)
            data.current[deployment.id] = deployment.updated(status.with_state(DeploymentState.PUBLISHING))
            published.append(deployment.id)
        self.log.info(
            "Published %d validated deployment(s) out of %d",
            len(published),
            len(data.current),
        )
        if changed or published:
            self.store.save(data)
        return published
