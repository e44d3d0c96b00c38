"""
Artifact Harvester - Server build artifact index built from GitHub tags.

Fetches release tags (and issues) from GitHub, normalizes them into
per-platform artifact records, and answers filtered, sorted, paginated
queries over them.
"""

__version__ = "1.0.0"


def __getattr__(name: str):
    """Lazy import for heavy dependencies."""
    if name == "ArtifactsService":
        from artifact_harvester.core.service import ArtifactsService

        return ArtifactsService
    if name == "ArtifactsQuery":
        from artifact_harvester.models.artifact import ArtifactsQuery

        return ArtifactsQuery
    if name == "ArtifactEntry":
        from artifact_harvester.models.artifact import ArtifactEntry

        return ArtifactEntry
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["ArtifactsService", "ArtifactsQuery", "ArtifactEntry", "__version__"]
