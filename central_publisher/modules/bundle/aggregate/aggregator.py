"""Stage publication artifacts under their registry file names."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from central_publisher.exceptions import InvalidInputError, PublisherIOError
from central_publisher.modules.bundle.domain import ArtifactDescriptor
from central_publisher.modules.bundle.domain.constants import (
    JAR_EXTENSION,
    MODULE_METADATA_FILE,
    POM_FILE,
    SIGNATURE_SUFFIX,
)


def staged_name(artifact_id: str, version: str, descriptor: ArtifactDescriptor) -> str:
    """Return the registry file name for ``descriptor``.

    ``module.json`` and ``pom-default.xml`` (and their signatures) get fixed
    names, jars are renamed to ``<artifactId>-<version>[-<classifier>].<ext>``
    and everything else keeps its original name.
    """
    name = descriptor.file_name
    base = f"{artifact_id}-{version}"
    fixed = {
        MODULE_METADATA_FILE: f"{base}.module",
        MODULE_METADATA_FILE + SIGNATURE_SUFFIX: f"{base}.module{SIGNATURE_SUFFIX}",
        POM_FILE: f"{base}.pom",
        POM_FILE + SIGNATURE_SUFFIX: f"{base}.pom{SIGNATURE_SUFFIX}",
    }
    if name in fixed:
        return fixed[name]
    jar_suffix = f".{JAR_EXTENSION}"
    if name.endswith(jar_suffix) or name.endswith(jar_suffix + SIGNATURE_SUFFIX):
        extension = descriptor.extension or JAR_EXTENSION
        if name.endswith(SIGNATURE_SUFFIX) and not extension.endswith(SIGNATURE_SUFFIX):
            extension += SIGNATURE_SUFFIX
        classifier = f"-{descriptor.classifier}" if descriptor.classifier else ""
        return f"{base}{classifier}.{extension}"
    return name


class ArtifactAggregator:
    """Copies a publication's artifacts into a clean staging directory."""

    def __init__(self) -> None:
        self.log = logging.getLogger(self.__class__.__name__)

    def aggregate(
        self,
        group_id: str,
        artifact_id: str,
        version: str,
        artifacts: Iterable[ArtifactDescriptor],
        target_dir: Path,
    ) -> List[Path]:
        plan = self._plan(artifact_id, version, artifacts)
        self._reset_directory(target_dir)
        self.log.info(
            "Aggregating %d artifacts of %s:%s:%s into %s",
            len(plan),
            group_id,
            artifact_id,
            version,
            target_dir,
        )
        staged: List[Path] = []
        for new_name in sorted(plan):
            descriptor = plan[new_name]
            target = target_dir / new_name
            try:
                shutil.copyfile(descriptor.source_path, target)
            except OSError as exc:
                raise PublisherIOError(
                    f"Failed to copy {descriptor.source_path} to {target}: {exc}"
                ) from exc
            self.log.debug("Copied %s (%s) -> %s", descriptor.source_path, descriptor.role.value, target)
            staged.append(target)
        return staged

    def _plan(
        self,
        artifact_id: str,
        version: str,
        artifacts: Iterable[ArtifactDescriptor],
    ) -> Dict[str, ArtifactDescriptor]:
        plan: Dict[str, ArtifactDescriptor] = {}
        for descriptor in artifacts:
            if not descriptor.source_path.is_file():
                raise PublisherIOError(f"Artifact file {descriptor.source_path} does not exist")
            new_name = staged_name(artifact_id, version, descriptor)
            existing: Optional[ArtifactDescriptor] = plan.get(new_name)
            if existing is not None and existing.source_path != descriptor.source_path:
                raise InvalidInputError(
                    f"Artifacts {existing.source_path} and {descriptor.source_path} "
                    f"both map to {new_name}"
                )
            plan[new_name] = descriptor
        return plan

    def _reset_directory(self, target_dir: Path) -> None:
        try:
            if target_dir.exists():
                shutil.rmtree(target_dir)
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PublisherIOError(f"Failed to prepare staging directory {target_dir}: {exc}") from exc


def aggregate(
    group_id: str,
    artifact_id: str,
    version: str,
    artifacts: Iterable[ArtifactDescriptor],
    target_dir: Path,
) -> List[Path]:
    return ArtifactAggregator().aggregate(group_id, artifact_id, version, artifacts, target_dir)
