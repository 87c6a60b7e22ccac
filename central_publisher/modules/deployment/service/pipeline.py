"""Sequential publish pipeline: aggregate -> digest -> archive -> upload -> track."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from central_publisher.modules.bundle import BundleResult, BundleService
from central_publisher.modules.deployment.domain import Deployment, PublicationConfig, PublishingType

from .lifecycle import DeploymentLifecycleService


@dataclass
class PublishOutcome:
    bundle: BundleResult
    deployment: Deployment
    publishing_type: PublishingType


class PublishPipeline:
    def __init__(
        self,
        bundle_service: BundleService,
        lifecycle: DeploymentLifecycleService,
        default_publishing_type: PublishingType = PublishingType.USER_MANAGED,
    ) -> None:
        self.bundle_service = bundle_service
        self.lifecycle = lifecycle
        self.default_publishing_type = default_publishing_type
        self.log = logging.getLogger(self.__class__.__name__)

    def build_bundle(self, publication: PublicationConfig) -> BundleResult:
        return self.bundle_service.build(
            publication.name,
            publication.coordinates,
            publication.artifacts,
            publication.additional_algorithms,
        )

    def publish(self, publication: PublicationConfig) -> PublishOutcome:
        publishing_type = publication.publishing_type or self.default_publishing_type
        self.log.info(
            "Publishing %s (%s) as %s",
            publication.name,
            publication.coordinates,
            publishing_type.value,
        )
        bundle = self.build_bundle(publication)
        deployment = self.lifecycle.upload(bundle.archive_path, publishing_type, publication.coordinates)
        return PublishOutcome(bundle=bundle, deployment=deployment, publishing_type=publishing_type)
