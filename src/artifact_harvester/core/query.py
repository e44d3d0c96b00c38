"""
Query pipeline over flattened artifact entries.

Filtering, sorting and pagination are pure functions; none of them mutates
its input list.
"""

from datetime import datetime, timezone
from functools import cmp_to_key

from artifact_harvester.models.artifact import (
    ArtifactData,
    ArtifactEntry,
    PlatformSummary,
    SupportStatus,
)

DEFAULT_LIMIT = 50
DEFAULT_SORT_BY = "version"
DEFAULT_SORT_ORDER = "desc"


def flatten_artifacts(data: ArtifactData) -> list[ArtifactEntry]:
    """Flatten platform maps into entries: all Windows entries, then all Linux."""
    entries = []
    for platform, artifacts in data.platforms().items():
        for version, artifact in artifacts.items():
            entries.append(ArtifactEntry.from_artifact(version, artifact, platform))
    return entries


def parse_version(version: str) -> int:
    """Parse the leading run of ASCII digits ('24769-beta' -> 24769, 'abc' -> 0)."""
    digits = ""
    for ch in version:
        if "0" <= ch <= "9":
            digits += ch
        else:
            break
    return int(digits) if digits else 0


def _parse_date(value: str) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, TypeError, AttributeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def compare_entries(a: ArtifactEntry, b: ArtifactEntry, sort_by: str) -> int:
    """Three-way comparison of two entries on `sort_by` (ascending sense)."""
    match sort_by:
        case "version":
            return _sign(parse_version(a.version) - parse_version(b.version))
        case "date":
            date_a, date_b = _parse_date(a.date), _parse_date(b.date)
            if date_a is None or date_b is None:
                return 0
            return (date_a > date_b) - (date_a < date_b)
        case "size":
            return _sign(a.size - b.size)
        case _:
            return (a.version > b.version) - (a.version < b.version)


def filter_artifacts(
    artifacts: list[ArtifactEntry],
    platform: str = "",
    version: str = "",
    status: str = "",
    include_eol: bool = False,
) -> list[ArtifactEntry]:
    """
    Filter entries. Each criterion is skipped when unset.

    Args:
        artifacts: Entries to filter.
        platform: Exact platform name; empty or "all" disables the filter.
        version: Exact version string.
        status: Exact support status.
        include_eol: Keep end-of-life entries.

    Returns:
        A new list preserving the input order.
    """
    filtered = list(artifacts)

    if platform and platform != "all":
        filtered = [a for a in filtered if a.platform.value == platform]

    if version:
        filtered = [a for a in filtered if a.version == version]

    if status:
        filtered = [a for a in filtered if a.support_status.value == status]

    if not include_eol:
        filtered = [a for a in filtered if a.support_status != SupportStatus.EOL]

    return filtered


def sort_artifacts(
    artifacts: list[ArtifactEntry], sort_by: str = "", sort_order: str = ""
) -> list[ArtifactEntry]:
    """
    Stable sort by version, date or size.

    Unknown fields sort lexicographically by version string. "asc" sorts
    ascending; any other order (including unset) sorts descending.
    """
    sort_by = sort_by or DEFAULT_SORT_BY
    sort_order = sort_order or DEFAULT_SORT_ORDER
    direction = 1 if sort_order == "asc" else -1

    return sorted(
        artifacts,
        key=cmp_to_key(lambda a, b: direction * compare_entries(a, b, sort_by)),
    )


def paginate_artifacts(
    artifacts: list[ArtifactEntry], limit: int, offset: int
) -> list[ArtifactEntry]:
    """Return `artifacts[offset:offset + limit]`, or nothing for an out-of-range offset."""
    if offset < 0 or offset >= len(artifacts):
        return []
    end = min(offset + limit, len(artifacts))
    return artifacts[offset:end]


def summarize_artifacts(data: ArtifactData) -> dict[str, PlatformSummary]:
    """
    Per-platform statistics over the unfiltered artifact data.

    `latest` is the highest build; `recommended` is the highest build whose
    status is recommended.
    """
    summaries = {}
    for platform, artifacts in data.platforms().items():
        entries = sort_artifacts(
            [ArtifactEntry.from_artifact(v, a, platform) for v, a in artifacts.items()],
            "version",
            "desc",
        )
        summary = PlatformSummary(
            total=len(entries),
            counts={status.value: 0 for status in SupportStatus},
        )
        for entry in entries:
            summary.counts[entry.support_status.value] += 1

        if entries:
            summary.latest = entries[0]
        summary.recommended = next(
            (e for e in entries if e.support_status == SupportStatus.RECOMMENDED), None
        )
        summaries[platform.value] = summary

    return summaries
