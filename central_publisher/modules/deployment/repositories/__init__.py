from .store import DeploymentStore

__all__ = ["DeploymentStore"]
