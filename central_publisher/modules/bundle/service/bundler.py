"""Aggregate, digest and archive one publication inside the work directory."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from central_publisher.exceptions import InvalidInputError, PublisherIOError
from central_publisher.modules.bundle.aggregate import ArtifactAggregator
from central_publisher.modules.bundle.archive import ZipBundleBuilder
from central_publisher.modules.bundle.digest import ChecksumWriter
from central_publisher.modules.bundle.domain import (
    ArtifactDescriptor,
    PublicationCoordinates,
    require_path_segment,
)
from central_publisher.modules.bundle.domain.constants import AGGREGATE_FOLDER_NAME, ARCHIVE_FILE_NAME


@dataclass
class BundleResult:
    staging_dir: Path
    archive_path: Path
    staged_files: List[Path] = field(default_factory=list)
    digest_files: List[Path] = field(default_factory=list)


class BundleService:
    """Runs aggregate -> digest -> archive for a named publication."""

    def __init__(
        self,
        work_dir: Path,
        default_algorithms: Sequence[str] = (),
        aggregator: Optional[ArtifactAggregator] = None,
        checksum_writer: Optional[ChecksumWriter] = None,
        archive_builder: Optional[ZipBundleBuilder] = None,
    ) -> None:
        self.work_dir = work_dir
        self.default_algorithms = list(default_algorithms)
        self.aggregator = aggregator or ArtifactAggregator()
        self.checksum_writer = checksum_writer or ChecksumWriter()
        self.archive_builder = archive_builder or ZipBundleBuilder()
        self.log = logging.getLogger(self.__class__.__name__)

    def publication_dir(self, name: str) -> Path:
        require_path_segment(name, "Publication name")
        target = self.work_dir / name
        root = self.work_dir.resolve()
        resolved = target.resolve()
        if resolved == root or root not in resolved.parents:
            raise InvalidInputError(f"Publication {name!r} resolves outside of {self.work_dir}")
        return target

    def staging_dir(self, name: str, coordinates: PublicationCoordinates) -> Path:
        return self.publication_dir(name).joinpath(AGGREGATE_FOLDER_NAME, *coordinates.path_segments)

    def archive_path(self, name: str) -> Path:
        return self.publication_dir(name) / ARCHIVE_FILE_NAME

    def build(
        self,
        name: str,
        coordinates: PublicationCoordinates,
        artifacts: Sequence[ArtifactDescriptor],
        algorithms: Optional[Sequence[str]] = None,
    ) -> BundleResult:
        aggregate_root = self.publication_dir(name) / AGGREGATE_FOLDER_NAME
        staging = self.staging_dir(name, coordinates)
        archive = self.archive_path(name)
        self.log.info("Building bundle for publication=%s coordinates=%s", name, coordinates)

        try:
            if aggregate_root.exists():
                shutil.rmtree(aggregate_root)
        except OSError as exc:
            raise PublisherIOError(f"Failed to clean {aggregate_root}: {exc}") from exc

        staged = self.aggregator.aggregate(
            coordinates.group_id,
            coordinates.artifact_id,
            coordinates.version,
            artifacts,
            staging,
        )
        chosen = self.default_algorithms if algorithms is None else list(algorithms)
        digests = self.checksum_writer.compute_digests(staging, chosen)
        self.archive_builder.build_archive(aggregate_root, archive)
        self.log.info(
            "Bundle ready publication=%s files=%d digests=%d archive=%s",
            name,
            len(staged),
            len(digests),
            archive,
        )
        return BundleResult(
            staging_dir=staging,
            archive_path=archive,
            staged_files=staged,
            digest_files=digests,
        )
