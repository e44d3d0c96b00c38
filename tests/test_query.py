"""Tests for the filter / sort / paginate pipeline."""

import pytest

from artifact_harvester.core.processor import process_tags
from artifact_harvester.core.query import (
    filter_artifacts,
    flatten_artifacts,
    paginate_artifacts,
    parse_version,
    sort_artifacts,
    summarize_artifacts,
)
from artifact_harvester.models.artifact import ArtifactEntry, GitHubTag, Platform, SupportStatus


def make_entry(
    version: str,
    platform: Platform = Platform.WINDOWS,
    status: SupportStatus = SupportStatus.ACTIVE,
    date: str = "2026-01-01T00:00:00Z",
    size: int = 100,
) -> ArtifactEntry:
    return ArtifactEntry(
        version=version,
        hash=f"sha{version}",
        platform=platform,
        date=date,
        support_status=status,
        url=f"https://example.invalid/{version}",
        size=size,
    )


@pytest.fixture
def mixed_entries():
    return [
        make_entry("24769", Platform.WINDOWS, SupportStatus.RECOMMENDED),
        make_entry("24100", Platform.WINDOWS, SupportStatus.LATEST),
        make_entry("19000", Platform.WINDOWS, SupportStatus.EOL),
        make_entry("24769", Platform.LINUX, SupportStatus.RECOMMENDED),
        make_entry("24100", Platform.LINUX, SupportStatus.LATEST),
        make_entry("19000", Platform.LINUX, SupportStatus.EOL),
    ]


def versions(entries):
    return [e.version for e in entries]


# ═══════════════════════════════════════════
# Flattening
# ═══════════════════════════════════════════


class TestFlatten:
    def test_one_entry_per_version_and_platform(self):
        data = process_tags(
            [GitHubTag(name="v1.0.0.24769", commit_sha="a"), GitHubTag(name="v1.0.0.100", commit_sha="b")]
        )
        entries = flatten_artifacts(data)
        pairs = {(e.version, e.platform) for e in entries}
        assert pairs == {
            ("24769", Platform.WINDOWS),
            ("24769", Platform.LINUX),
            ("100", Platform.WINDOWS),
            ("100", Platform.LINUX),
        }


# ═══════════════════════════════════════════
# Filtering
# ═══════════════════════════════════════════


class TestFilter:
    def test_excludes_eol_by_default(self, mixed_entries):
        result = filter_artifacts(mixed_entries)
        assert all(e.support_status != SupportStatus.EOL for e in result)
        assert len(result) == 4

    def test_cleared_filters_are_identity(self, mixed_entries):
        result = filter_artifacts(mixed_entries, include_eol=True)
        assert result == mixed_entries
        assert result is not mixed_entries

    def test_platform(self, mixed_entries):
        result = filter_artifacts(mixed_entries, platform="linux", include_eol=True)
        assert {e.platform for e in result} == {Platform.LINUX}
        assert len(result) == 3

    def test_platform_all_and_empty(self, mixed_entries):
        assert filter_artifacts(mixed_entries, platform="all", include_eol=True) == mixed_entries
        assert filter_artifacts(mixed_entries, platform="", include_eol=True) == mixed_entries

    def test_platform_is_case_sensitive(self, mixed_entries):
        assert filter_artifacts(mixed_entries, platform="Linux", include_eol=True) == []

    def test_version_exact(self, mixed_entries):
        result = filter_artifacts(mixed_entries, version="24100")
        assert versions(result) == ["24100", "24100"]
        assert filter_artifacts(mixed_entries, version="241") == []

    def test_status(self, mixed_entries):
        result = filter_artifacts(mixed_entries, status="recommended")
        assert versions(result) == ["24769", "24769"]

    def test_eol_status_needs_include_eol(self, mixed_entries):
        assert filter_artifacts(mixed_entries, status="eol") == []
        assert len(filter_artifacts(mixed_entries, status="eol", include_eol=True)) == 2

    def test_filters_compose_in_any_order(self, mixed_entries):
        combined = filter_artifacts(mixed_entries, platform="windows", status="latest")

        by_platform = filter_artifacts(mixed_entries, platform="windows", include_eol=True)
        platform_then_status = filter_artifacts(by_platform, status="latest")

        by_status = filter_artifacts(mixed_entries, status="latest", include_eol=True)
        status_then_platform = filter_artifacts(by_status, platform="windows")

        assert combined == platform_then_status == status_then_platform
        assert versions(combined) == ["24100"]


# ═══════════════════════════════════════════
# Sorting
# ═══════════════════════════════════════════


class TestSort:
    def test_version_descending_by_default(self):
        entries = [make_entry("100"), make_entry("50"), make_entry("200")]
        assert versions(sort_artifacts(entries)) == ["200", "100", "50"]

    def test_version_ascending(self):
        entries = [make_entry("100"), make_entry("50"), make_entry("200")]
        assert versions(sort_artifacts(entries, "version", "asc")) == ["50", "100", "200"]

    def test_unknown_order_is_descending(self):
        entries = [make_entry("1"), make_entry("3"), make_entry("2")]
        assert versions(sort_artifacts(entries, "version", "sideways")) == ["3", "2", "1"]

    def test_version_is_numeric(self):
        entries = [make_entry("9"), make_entry("100"), make_entry("10")]
        assert versions(sort_artifacts(entries, "version", "asc")) == ["9", "10", "100"]

    @pytest.mark.parametrize("order", ["asc", "desc"])
    def test_ties_keep_input_order(self, order):
        entries = [
            make_entry("100", Platform.LINUX),
            make_entry("100", Platform.WINDOWS),
            make_entry("100", Platform.LINUX, size=1),
        ]
        result = sort_artifacts(entries, "version", order)
        assert result == entries

    def test_does_not_mutate_input(self):
        entries = [make_entry("1"), make_entry("2")]
        sort_artifacts(entries)
        assert versions(entries) == ["1", "2"]

    def test_date(self):
        entries = [
            make_entry("1", date="2025-06-01T00:00:00Z"),
            make_entry("2", date="2024-01-01T00:00:00Z"),
            make_entry("3", date="2026-03-15T10:30:00+00:00"),
        ]
        assert versions(sort_artifacts(entries, "date", "asc")) == ["2", "1", "3"]
        assert versions(sort_artifacts(entries, "date", "desc")) == ["3", "1", "2"]

    def test_unparseable_dates_compare_equal(self):
        entries = [make_entry("1", date="yesterday"), make_entry("2", date="soon"), make_entry("3", date="")]
        assert versions(sort_artifacts(entries, "date", "asc")) == ["1", "2", "3"]
        assert versions(sort_artifacts(entries, "date", "desc")) == ["1", "2", "3"]

    def test_size(self):
        entries = [
            make_entry("1", Platform.LINUX, size=400),
            make_entry("2", Platform.WINDOWS, size=850),
            make_entry("3", Platform.LINUX, size=10),
        ]
        assert versions(sort_artifacts(entries, "size", "asc")) == ["3", "1", "2"]
        assert versions(sort_artifacts(entries, "size")) == ["2", "1", "3"]

    def test_unknown_field_is_lexicographic(self):
        entries = [make_entry("9"), make_entry("10"), make_entry("100")]
        assert versions(sort_artifacts(entries, "name", "asc")) == ["10", "100", "9"]
        assert versions(sort_artifacts(entries, "name", "desc")) == ["9", "100", "10"]


class TestParseVersion:
    @pytest.mark.parametrize(
        "raw,expected",
        [("24769", 24769), ("123abc", 123), ("abc123", 0), ("", 0), ("٣٤", 0)],
    )
    def test_leading_digits(self, raw, expected):
        assert parse_version(raw) == expected


# ═══════════════════════════════════════════
# Pagination
# ═══════════════════════════════════════════


class TestPaginate:
    @pytest.fixture
    def ten(self):
        return [make_entry(str(i)) for i in range(10)]

    def test_tail_slice(self, ten):
        assert paginate_artifacts(ten, limit=3, offset=7) == ten[7:10]

    def test_offset_at_end(self, ten):
        assert paginate_artifacts(ten, limit=3, offset=10) == []

    def test_negative_offset(self, ten):
        assert paginate_artifacts(ten, limit=3, offset=-1) == []

    def test_first_page(self, ten):
        assert paginate_artifacts(ten, limit=3, offset=0) == ten[:3]

    def test_limit_past_end(self, ten):
        assert paginate_artifacts(ten, limit=50, offset=8) == ten[8:]

    def test_empty_input(self):
        assert paginate_artifacts([], limit=50, offset=0) == []


# ═══════════════════════════════════════════
# Summary
# ═══════════════════════════════════════════


class TestSummary:
    def test_counts_latest_and_recommended(self):
        data = process_tags(
            [
                GitHubTag(name="v1.0.0.24300", commit_sha="a"),
                GitHubTag(name="v1.0.0.24600", commit_sha="b"),
                GitHubTag(name="v1.0.0.24800", commit_sha="c"),
                GitHubTag(name="v1.0.0.18000", commit_sha="d"),
            ]
        )
        summary = summarize_artifacts(data)

        assert set(summary) == {"windows", "linux"}
        windows = summary["windows"]
        assert windows.total == 4
        assert windows.counts == {
            "recommended": 2,
            "latest": 1,
            "active": 0,
            "deprecated": 0,
            "eol": 1,
        }
        assert windows.latest.version == "24800"
        assert windows.recommended.version == "24800"

    def test_no_recommended_build(self):
        data = process_tags([GitHubTag(name="v1.0.0.21000", commit_sha="a")])
        summary = summarize_artifacts(data)
        assert summary["linux"].recommended is None
        assert summary["linux"].latest.version == "21000"
