"""Bundle module: staging, digests and archive of a publication."""

from .service import BundleResult, BundleService

__all__ = ["BundleResult", "BundleService"]
