from .publisher import ArtifactPublisher, collect_artifacts, content_type_for

__all__ = ["ArtifactPublisher", "collect_artifacts", "content_type_for"]
