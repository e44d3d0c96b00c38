"""Tests for ArtifactEntry serialization and exporters."""

import json
import tempfile
from pathlib import Path

import pytest

from artifact_harvester.exporters import JSONExporter
from artifact_harvester.models.artifact import ArtifactEntry, Platform, SupportStatus


@pytest.fixture
def sample_entry():
    return ArtifactEntry(
        version="24769",
        hash="ad6c90072e62cdb7ee0dcc943d7ded8a5107d542",
        platform=Platform.LINUX,
        date="2026-10-18T12:00:00Z",
        support_status=SupportStatus.RECOMMENDED,
        url="https://runtime.fivem.net/artifacts/fivem/build_proot_linux/master/24769-ad6c900/fx.tar.xz",
        size=400 * 1024 * 1024,
    )


# ═══════════════════════════════════════════
# ArtifactEntry Model Tests
# ═══════════════════════════════════════════


class TestArtifactEntry:
    def test_to_dict(self, sample_entry):
        d = sample_entry.to_dict()
        assert d["version"] == "24769"
        assert d["platform"] == "linux"
        assert d["support_status"] == "recommended"
        assert d["size"] == 400 * 1024 * 1024

    def test_to_dict_is_json_serializable(self, sample_entry):
        assert json.loads(json.dumps(sample_entry.to_dict()))["hash"] == sample_entry.hash


# ═══════════════════════════════════════════
# JSON Exporter Tests
# ═══════════════════════════════════════════


class TestJSONExporter:
    @pytest.mark.asyncio
    async def test_exports_json_array(self, sample_entry):
        with tempfile.TemporaryDirectory() as tmpdir:
            exporter = JSONExporter(output_dir=Path(tmpdir) / "out")
            await exporter.export(sample_entry)
            await exporter.finalize()

            outfile = Path(tmpdir) / "out" / "artifacts.json"
            assert outfile.exists()

            data = json.loads(outfile.read_text())
            assert len(data) == 1
            assert data[0]["version"] == "24769"
            assert data[0]["platform"] == "linux"

    @pytest.mark.asyncio
    async def test_count_tracking(self, sample_entry):
        with tempfile.TemporaryDirectory() as tmpdir:
            exporter = JSONExporter(output_dir=Path(tmpdir))
            await exporter.export(sample_entry)
            await exporter.export(sample_entry)
            assert exporter.count == 2

    @pytest.mark.asyncio
    async def test_empty_export_writes_empty_array(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            exporter = JSONExporter(output_dir=Path(tmpdir))
            await exporter.finalize()
            assert json.loads(exporter.path.read_text()) == []
