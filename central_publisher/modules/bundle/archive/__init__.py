from .zip_builder import ZipBundleBuilder, build_archive

__all__ = ["ZipBundleBuilder", "build_archive"]
