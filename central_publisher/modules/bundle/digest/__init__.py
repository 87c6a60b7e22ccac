from .checksums import (
    ChecksumWriter,
    algorithm_extension,
    compute_digests,
    file_digest,
    resolve_algorithms,
)

__all__ = [
    "ChecksumWriter",
    "algorithm_extension",
    "compute_digests",
    "file_digest",
    "resolve_algorithms",
]
