"""Domain objects describing a publication and its artifacts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from central_publisher.exceptions import InvalidInputError
from central_publisher.modules.bundle.domain.constants import (
    JAR_EXTENSION,
    MODULE_METADATA_FILE,
    POM_FILE,
    SIGNATURE_SUFFIX,
)


def require_path_segment(value: str, field_name: str) -> str:
    """Reject values that would not stay a single directory name."""
    if value in (".", "..") or "/" in value or "\\" in value or "\x00" in value:
        raise InvalidInputError(f"{field_name} must be a plain name, got {value!r}")
    return value


def _first_non_empty(payload: Dict[str, Any], *keys: str, default: Optional[str] = None) -> str:
    for key in keys:
        if key in payload and payload[key] is not None:
            value = str(payload[key]).strip()
            if value:
                return value
    if default is not None:
        return default
    raise InvalidInputError(f"Missing required field {keys[0]}")


class ArtifactRole(str, Enum):
    MAIN = "MAIN"
    POM = "POM"
    MODULE_METADATA = "MODULE_METADATA"
    SIGNATURE = "SIGNATURE"
    OTHER = "OTHER"

    @classmethod
    def infer(cls, file_name: str) -> "ArtifactRole":
        if file_name.endswith(SIGNATURE_SUFFIX):
            return cls.SIGNATURE
        if file_name == POM_FILE:
            return cls.POM
        if file_name == MODULE_METADATA_FILE:
            return cls.MODULE_METADATA
        if file_name.endswith(f".{JAR_EXTENSION}"):
            return cls.MAIN
        return cls.OTHER


@dataclass(frozen=True)
class PublicationCoordinates:
    """Represents the Maven coordinates of a publication."""

    group_id: str
    artifact_id: str
    version: str

    def __post_init__(self) -> None:
        for name in ("group_id", "artifact_id", "version"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise InvalidInputError(f"Publication {name} must not be blank")
        for part in self.group_id.split("."):
            if not part:
                raise InvalidInputError(f"Publication group_id {self.group_id!r} has an empty segment")
            require_path_segment(part, "Publication group_id")
        require_path_segment(self.artifact_id, "Publication artifact_id")
        require_path_segment(self.version, "Publication version")

    @property
    def coordinates(self) -> str:
        return ":".join((self.group_id, self.artifact_id, self.version))

    @property
    def path_segments(self) -> List[str]:
        group_path = self.group_id.replace(".", "/")
        return [group_path, self.artifact_id, self.version]

    def __str__(self) -> str:
        return self.coordinates


@dataclass(frozen=True)
class ArtifactDescriptor:
    """A file produced by the build, with its logical role."""

    source_path: Path
    extension: str
    classifier: Optional[str] = None
    role: ArtifactRole = ArtifactRole.OTHER

    @property
    def file_name(self) -> str:
        return self.source_path.name

    @classmethod
    def from_path(cls, path: Path, classifier: Optional[str] = None) -> "ArtifactDescriptor":
        name = path.name
        if name.endswith(f".{JAR_EXTENSION}{SIGNATURE_SUFFIX}"):
            extension = f"{JAR_EXTENSION}{SIGNATURE_SUFFIX}"
        else:
            extension = path.suffix.lstrip(".")
        return cls(
            source_path=path,
            extension=extension,
            classifier=str(classifier).strip() or None if classifier is not None else None,
            role=ArtifactRole.infer(name),
        )

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ArtifactDescriptor":
        if not isinstance(payload, dict):
            raise InvalidInputError("artifact entry must be an object")
        path = Path(_first_non_empty(payload, "source_path", "sourcePath", "path"))
        inferred = cls.from_path(path, classifier=payload.get("classifier"))
        extension = _first_non_empty(payload, "extension", "ext", default=inferred.extension).lstrip(".")
        role_value = _first_non_empty(payload, "role", default=inferred.role.value).upper()
        try:
            role = ArtifactRole(role_value)
        except ValueError as exc:
            raise InvalidInputError(f"Unknown artifact role {role_value} for {path}") from exc
        return cls(
            source_path=path,
            extension=extension,
            classifier=inferred.classifier,
            role=role,
        )
