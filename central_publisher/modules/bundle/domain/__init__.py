from .artifact import ArtifactDescriptor, ArtifactRole, PublicationCoordinates, require_path_segment

__all__ = [
    "ArtifactDescriptor",
    "ArtifactRole",
    "PublicationCoordinates",
    "require_path_segment",
]
