"""Enumerations for the deployment module."""

from __future__ import annotations

from enum import Enum


class PublishingType(str, Enum):
    AUTOMATIC = "AUTOMATIC"
    USER_MANAGED = "USER_MANAGED"


class DeploymentState(str, Enum):
    PENDING = "PENDING"
    VALIDATING = "VALIDATING"
    VALIDATED = "VALIDATED"
    PUBLISHING = "PUBLISHING"
    PUBLISHED = "PUBLISHED"
    FAILED = "FAILED"
