"""FastAPI routes for publishing bundles and managing deployments."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from central_publisher.exceptions import (
    DeploymentNotFoundError,
    InvalidCredentialsError,
    InvalidInputError,
    PublisherError,
    RegistryApiError,
    UnsupportedAlgorithmError,
)
from central_publisher.modules.deployment.domain import PublicationConfig
from central_publisher.modules.deployment.service import DeploymentLifecycleService, PublishPipeline

log = logging.getLogger(__name__)

router = APIRouter(prefix="/central", tags=["central-publish"])


def get_lifecycle(request: Request) -> DeploymentLifecycleService:
    container = getattr(request.app.state, "container", None)
    if not container or not getattr(container, "lifecycle_service", None):
        raise HTTPException(status_code=500, detail="Deployment service not initialized.")
    return container.lifecycle_service


def get_pipeline(request: Request) -> PublishPipeline:
    container = getattr(request.app.state, "container", None)
    if not container or not getattr(container, "publish_pipeline", None):
        raise HTTPException(status_code=500, detail="Publish pipeline not initialized.")
    return container.publish_pipeline


def _http_error(exc: PublisherError) -> HTTPException:
    if isinstance(exc, (InvalidInputError, InvalidCredentialsError, UnsupportedAlgorithmError)):
        status = 400
    elif isinstance(exc, DeploymentNotFoundError):
        status = 404
    elif isinstance(exc, RegistryApiError):
        status = 502
    else:
        status = 500
    log.error("Request failed: %s", exc)
    return HTTPException(status_code=status, detail=str(exc))


@router.post("/publications")
def publish_publication(payload: Dict[str, Any], pipeline: PublishPipeline = Depends(get_pipeline)):
    try:
        publication = PublicationConfig.from_payload(payload)
        outcome = pipeline.publish(publication)
    except PublisherError as exc:
        raise _http_error(exc) from exc
    return {
        "status": "true",
        "data": {
            "publication": publication.name,
            "publishingType": outcome.publishing_type.value,
            "archive": str(outcome.bundle.archive_path),
            "deployment": outcome.deployment.to_dict(),
        },
    }


@router.get("/deployments")
def check_deployments(
    deployment_id: Optional[str] = Query(None, alias="deploymentId"),
    svc: DeploymentLifecycleService = Depends(get_lifecycle),
):
    try:
        data = svc.check_deployments(deployment_id)
        if deployment_id is not None:
            return {"status": "true", "data": svc.get_deployment(deployment_id).to_dict()}
    except PublisherError as exc:
        raise _http_error(exc) from exc
    return {"status": "true", "data": [dep.to_dict() for dep in data.current.values()]}


@router.get("/deployments/{deployment_id}/status")
def deployment_status(deployment_id: str, svc: DeploymentLifecycleService = Depends(get_lifecycle)):
    try:
        status = svc.fetch_status(deployment_id)
    except PublisherError as exc:
        raise _http_error(exc) from exc
    if status is None:
        raise HTTPException(status_code=404, detail=f"Deployment {deployment_id} not found on the portal")
    return {"status": "true", "data": status.to_dict()}


@router.post("/deployments/drop-failed")
def drop_failed(refresh: bool = False, svc: DeploymentLifecycleService = Depends(get_lifecycle)):
    try:
        dropped = svc.drop_failed(refresh=refresh)
    except PublisherError as exc:
        raise _http_error(exc) from exc
    return {"status": "true", "data": {"dropped": dropped}}


@router.post("/deployments/publish-validated")
def publish_validated(refresh: bool = False, svc: DeploymentLifecycleService = Depends(get_lifecycle)):
    try:
        published = svc.publish_validated(refresh=refresh)
    except PublisherError as exc:
        raise _http_error(exc) from exc
    return {"status": "true", "data": {"published": published}}


@router.post("/deployments/{deployment_id}/publish")
def publish_deployment(deployment_id: str, svc: DeploymentLifecycleService = Depends(get_lifecycle)):
    try:
        deployment = svc.publish_deployment(deployment_id)
    except PublisherError as exc:
        raise _http_error(exc) from exc
    return {"status": "true", "data": deployment.to_dict() if deployment else None}


@router.delete("/deployments/{deployment_id}")
def drop_deployment(deployment_id: str, svc: DeploymentLifecycleService = Depends(get_lifecycle)):
    try:
        svc.drop_deployment(deployment_id)
    except PublisherError as exc:
        raise _http_error(exc) from exc
    return {"status": "true", "msg": f"Deployment {deployment_id} dropped"}
