from .aggregator import ArtifactAggregator, aggregate, staged_name

__all__ = ["ArtifactAggregator", "aggregate", "staged_name"]
