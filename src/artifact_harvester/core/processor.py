"""
Tag Processor.

Turns raw GitHub tags into per-platform artifact maps using regex-based
parsing of the `vMAJOR.MINOR.PATCH.BUILD` naming convention.
"""

import logging
import re
from datetime import datetime, timezone

from artifact_harvester.models.artifact import (
    Artifact,
    ArtifactData,
    GitHubTag,
    Platform,
    SupportStatus,
)

logger = logging.getLogger(__name__)

ARTIFACT_TAG_PATTERN = re.compile(r"^v\d+\.\d+\.\d+\.\d+$", re.ASCII)
BUILD_NUMBER_PATTERN = re.compile(r"v\d+\.\d+\.\d+\.(\d+)$", re.ASCII)

ARTIFACTS_BASE_URL = "https://runtime.fivem.net/artifacts/fivem"

# (base path, file name) per platform
ARTIFACT_URL_TEMPLATES = {
    Platform.WINDOWS: ("build_server_windows/master", "server.zip"),
    Platform.LINUX: ("build_proot_linux/master", "fx.tar.xz"),
}

# Placeholder estimates, not measured
ESTIMATED_SIZES = {
    Platform.WINDOWS: 850 * 1024 * 1024,
    Platform.LINUX: 400 * 1024 * 1024,
}

# Lowest build number for each tier, highest first
SUPPORT_THRESHOLDS = [
    (24500, SupportStatus.RECOMMENDED),
    (24000, SupportStatus.LATEST),
    (23000, SupportStatus.ACTIVE),
    (20000, SupportStatus.DEPRECATED),
]

FALLBACK_ARTIFACTS = [
    ("24769", "ad6c90072e62cdb7ee0dcc943d7ded8a5107d542"),
    ("24574", "779c1fa38ec01b33d79a5e994b7e0c1a0bbcg421"),
    ("24573", "b85db86b37fdcab942859d3ef31cc4bd43eee8f6"),
]


def extract_version_number(tag_name: str) -> int:
    """
    Extract the build number from a tag name.

    'v1.0.0.24769' -> 24769
    'nightly' -> 0
    """
    match = BUILD_NUMBER_PATTERN.search(tag_name)
    if not match:
        return 0
    try:
        return int(match.group(1))
    except ValueError:
        return 0


def determine_support_status(version: int) -> SupportStatus:
    """Map a build number to its support tier."""
    for threshold, status in SUPPORT_THRESHOLDS:
        if version >= threshold:
            return status
    return SupportStatus.EOL


def estimate_size(version: str, platform: Platform) -> int:
    """Return the estimated download size in bytes (independent of version for now)."""
    return ESTIMATED_SIZES[platform]


def build_artifact_url(version: str, commit_sha: str, platform: Platform) -> str:
    """Build the download URL for a version/commit on a platform."""
    path, filename = ARTIFACT_URL_TEMPLATES[platform]
    return f"{ARTIFACTS_BASE_URL}/{path}/{version}-{commit_sha}/{filename}"


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _add_artifacts(data: ArtifactData, version: str, commit_sha: str, date: str) -> None:
    """Add one Windows and one Linux artifact for a version."""
    status = determine_support_status(int(version))
    for platform, artifacts in data.platforms().items():
        artifacts[version] = Artifact(
            version=version,
            hash=commit_sha,
            platform=platform,
            date=date,
            support_status=status,
            url=build_artifact_url(version, commit_sha, platform),
            size=estimate_size(version, platform),
        )


def generate_fallback_data(now: str | None = None) -> ArtifactData:
    """Build artifact data from the known-good fallback builds."""
    date = now or _timestamp()
    data = ArtifactData()
    for version, commit_sha in FALLBACK_ARTIFACTS:
        _add_artifacts(data, version, commit_sha, date)
    return data


def process_tags(tags: list[GitHubTag], now: str | None = None) -> ArtifactData:
    """
    Convert raw tags into per-platform artifact maps.

    Args:
        tags: Tags as fetched from GitHub.
        now: ISO-8601 timestamp stamped on every artifact (defaults to the
            current UTC time, taken once for the whole batch).

    Returns:
        ArtifactData with one Windows and one Linux entry per valid tag, or the
        fallback data when no tag matches the naming convention.
    """
    artifact_tags = [tag for tag in tags if ARTIFACT_TAG_PATTERN.fullmatch(tag.name)]
    artifact_tags.sort(key=lambda tag: extract_version_number(tag.name), reverse=True)

    date = now or _timestamp()
    data = ArtifactData()
    for tag in artifact_tags:
        version = str(extract_version_number(tag.name))
        _add_artifacts(data, version, tag.commit_sha, date)

    if not data.windows:
        logger.warning(f"No artifact tags among {len(tags)} tags, applying fallback data")
        return generate_fallback_data(date)

    logger.debug(f"Processed {len(data.windows)} artifact versions from {len(tags)} tags")
    return data
