"""Wire the publisher services from one Settings object."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx

from central_publisher.modules.bundle import BundleService
from central_publisher.modules.deployment.client import CentralPortalClient
from central_publisher.modules.deployment.repositories import DeploymentStore
from central_publisher.modules.deployment.service import DeploymentLifecycleService, PublishPipeline

from .settings import Settings

log = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Container that wires plain-Python services with shared settings."""

    settings: Settings
    http_client: Optional[httpx.Client] = None
    portal_client: CentralPortalClient = field(init=False)
    deployment_store: DeploymentStore = field(init=False)
    bundle_service: BundleService = field(init=False)
    lifecycle_service: DeploymentLifecycleService = field(init=False)
    publish_pipeline: PublishPipeline = field(init=False)

    def __post_init__(self) -> None:
        self.portal_client = CentralPortalClient(self.settings, client=self.http_client)
        self.deployment_store = DeploymentStore(self.settings.deployments_path)
        self.bundle_service = BundleService(
            self.settings.work_dir,
            default_algorithms=self.settings.central_additional_algorithms,
        )
        self.lifecycle_service = DeploymentLifecycleService(self.portal_client, self.deployment_store)
        self.publish_pipeline = PublishPipeline(
            self.bundle_service,
            self.lifecycle_service,
            default_publishing_type=self.settings.central_publishing_type,
        )
        log.info(
            "Publisher services ready base_url=%s work_dir=%s store=%s",
            self.settings.central_base_url,
            self.settings.work_dir,
            self.settings.deployments_path,
        )

    def close(self) -> None:
        self.portal_client.close()
