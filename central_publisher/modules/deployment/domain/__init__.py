from .enums import DeploymentState, PublishingType
from .models import Deployment, DeploymentsData, DeploymentStatus, timestamp
from .publication import PublicationConfig

__all__ = [
    "Deployment",
    "DeploymentsData",
    "DeploymentState",
    "DeploymentStatus",
    "PublicationConfig",
    "PublishingType",
    "timestamp",
]
