"""Export backends for artifact query results."""

from artifact_harvester.exporters.json_export import JSONExporter

__all__ = ["JSONExporter"]
