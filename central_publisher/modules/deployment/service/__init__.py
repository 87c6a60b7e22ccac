from .lifecycle import DeploymentLifecycleService
from .pipeline import PublishOutcome, PublishPipeline

__all__ = ["DeploymentLifecycleService", "PublishOutcome", "PublishPipeline"]
