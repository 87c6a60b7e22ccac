from .portal_client import CentralPortalClient

__all__ = ["CentralPortalClient"]
