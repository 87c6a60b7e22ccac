"""Publication request DTOs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from central_publisher.exceptions import InvalidInputError
from central_publisher.modules.bundle.domain import (
    ArtifactDescriptor,
    PublicationCoordinates,
    require_path_segment,
)

from .enums import PublishingType


def _first_non_empty(payload: Dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        if key in payload and payload[key] is not None:
            value = str(payload[key]).strip()
            if value:
                return value
    return None


@dataclass
class PublicationConfig:
    """One named publication: coordinates, artifacts and per-publication overrides."""

    name: str
    coordinates: PublicationCoordinates
    artifacts: List[ArtifactDescriptor] = field(default_factory=list)
    publishing_type: Optional[PublishingType] = None
    additional_algorithms: Optional[List[str]] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "PublicationConfig":
        if not isinstance(payload, dict):
            raise InvalidInputError("publication payload must be an object")
        coordinates = PublicationCoordinates(
            group_id=_first_non_empty(payload, "group_id", "groupId", "groupid") or "",
            artifact_id=_first_non_empty(payload, "artifact_id", "artifactId", "artifactid") or "",
            version=_first_non_empty(payload, "version") or "",
        )
        raw_artifacts = payload.get("artifacts")
        if not isinstance(raw_artifacts, list) or not raw_artifacts:
            raise InvalidInputError("artifacts must be a non-empty array")

        publishing_type = None
        type_value = _first_non_empty(payload, "publishing_type", "publishingType")
        if type_value:
            try:
                publishing_type = PublishingType(type_value.upper())
            except ValueError as exc:
                raise InvalidInputError(f"Unknown publishing type {type_value}") from exc

        algorithms = payload.get("additional_algorithms", payload.get("additionalAlgorithms"))
        if algorithms is not None and not isinstance(algorithms, list):
            raise InvalidInputError("additionalAlgorithms must be an array")

        return cls(
            name=require_path_segment(
                _first_non_empty(payload, "name") or coordinates.artifact_id,
                "Publication name",
            ),
            coordinates=coordinates,
            artifacts=[ArtifactDescriptor.from_dict(entry) for entry in raw_artifacts],
            publishing_type=publishing_type,
            additional_algorithms=[str(item) for item in algorithms] if algorithms is not None else None,
        )
