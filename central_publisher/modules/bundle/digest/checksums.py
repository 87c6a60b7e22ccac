"""Checksum files for the staged artifacts of a bundle."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Sequence

from central_publisher.exceptions import PublisherIOError, UnsupportedAlgorithmError
from central_publisher.modules.bundle.domain.constants import REQUIRED_ALGORITHMS, SIGNATURE_SUFFIX

CHUNK_SIZE = 65536

# MessageDigest-style names accepted by the portal tooling -> hashlib names
_KNOWN_ALGORITHMS: Dict[str, str] = {
    "MD5": "md5",
    "SHA-1": "sha1",
    "SHA-224": "sha224",
    "SHA-256": "sha256",
    "SHA-384": "sha384",
    "SHA-512": "sha512",
    "SHA3-224": "sha3_224",
    "SHA3-256": "sha3_256",
    "SHA3-384": "sha3_384",
    "SHA3-512": "sha3_512",
}

HashFactory = Callable[[], Any]


def algorithm_extension(algorithm: str) -> str:
    """``SHA-1`` -> ``sha1``."""
    return algorithm.replace("-", "").lower()


def resolve_algorithms(additional: Iterable[str] = ()) -> List[str]:
    """Required algorithms first, then the extra ones, without duplicates."""
    resolved: List[str] = []
    seen = set()
    for name in (*REQUIRED_ALGORITHMS, *additional):
        name = (name or "").strip()
        if not name:
            continue
        ext = algorithm_extension(name)
        if ext in seen:
            continue
        seen.add(ext)
        resolved.append(name)
    return resolved


def hash_factory(algorithm: str) -> HashFactory:
    hashlib_name = _KNOWN_ALGORITHMS.get(algorithm.upper())
    if hashlib_name is None:
        hashlib_name = algorithm.lower()
    if "/" in algorithm or hashlib_name not in hashlib.algorithms_available:
        raise UnsupportedAlgorithmError(f"Unsupported digest algorithm {algorithm}")
    try:
        instance = hashlib.new(hashlib_name)
    except ValueError as exc:
        raise UnsupportedAlgorithmError(f"Unsupported digest algorithm {algorithm}: {exc}") from exc
    # shake_* digests have no fixed length
    if hashlib_name.startswith("shake_") or instance.digest_size == 0:
        raise UnsupportedAlgorithmError(f"Variable length digest {algorithm} is not supported")
    return lambda: hashlib.new(hashlib_name)


def _hash_file(path: Path, factory: HashFactory) -> str:
    digest = factory()
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def file_digest(path: Path, algorithm: str) -> str:
    """Return the lowercase hex digest of ``path``."""
    factory = hash_factory(algorithm)
    try:
        return _hash_file(path, factory)
    except OSError as exc:
        raise PublisherIOError(f"Failed to read {path} for {algorithm} digest: {exc}") from exc


class ChecksumWriter:
    """Write ``<file>.<ext>`` digest files next to every file of a directory."""

    def __init__(self) -> None:
        self.log = logging.getLogger(self.__class__.__name__)

    def compute_digests(self, directory: Path, algorithms: Sequence[str] = ()) -> List[Path]:
        names = resolve_algorithms(algorithms)
        # fail before anything is written
        factories = {name: hash_factory(name) for name in names}
        extensions = [algorithm_extension(name) for name in names]

        if not directory.is_dir():
            raise PublisherIOError(f"Cannot compute digests, {directory} is not a readable directory")
        try:
            candidates = sorted(path for path in directory.iterdir() if path.is_file())
        except OSError as exc:
            raise PublisherIOError(f"Failed to list {directory}: {exc}") from exc

        written: List[Path] = []
        for path in candidates:
            if path.name.endswith(SIGNATURE_SUFFIX):
                continue
            if any(path.name.endswith(f".{ext}") for ext in extensions):
                continue
            for name, ext in zip(names, extensions):
                written.append(self._write_checksum(path, name, ext, factories[name]))
        self.log.info(
            "Computed %s digests for %d file(s) in %s",
            ",".join(names),
            len(written) // max(len(names), 1),
            directory,
        )
        return written

    def _write_checksum(self, path: Path, algorithm: str, ext: str, factory: HashFactory) -> Path:
        target = path.with_name(f"{path.name}.{ext}")
        try:
            target.write_text(_hash_file(path, factory), encoding="ascii")
        except OSError as exc:
            raise PublisherIOError(f"Failed to write {algorithm} digest for {path}: {exc}") from exc
        self.log.debug("Wrote %s", target)
        return target


def compute_digests(directory: Path, algorithms: Sequence[str] = ()) -> List[Path]:
    return ChecksumWriter().compute_digests(directory, algorithms)
