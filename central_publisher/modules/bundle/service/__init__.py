from .bundler import BundleResult, BundleService

__all__ = ["BundleResult", "BundleService"]
