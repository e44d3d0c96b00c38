"""
JSON Exporter — Writes query results to a single JSON file.
"""

import json
import logging
from pathlib import Path

import aiofiles

from artifact_harvester.models.artifact import ArtifactEntry

logger = logging.getLogger(__name__)


class JSONExporter:
    """
    Collects ArtifactEntry objects and writes them as one JSON array.

    Output:
        output_dir/
        └── artifacts.json
    """

    FILENAME = "artifacts.json"

    def __init__(self, output_dir: Path):
        self.output_dir = output_dir
        self.entries: list[dict] = []

    @property
    def path(self) -> Path:
        return self.output_dir / self.FILENAME

    @property
    def count(self) -> int:
        return len(self.entries)

    async def export(self, entry: ArtifactEntry) -> None:
        """Queue a single entry for writing."""
        self.entries.append(entry.to_dict())
        logger.debug(f"[JSON] Queued {entry.platform.value}/{entry.version}")

    async def finalize(self) -> None:
        """Write all queued entries to disk."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(self.path, "w") as f:
            await f.write(json.dumps(self.entries, indent=2))

        logger.info(f"[JSON] Export complete: {self.count} artifacts exported to {self.path}")
