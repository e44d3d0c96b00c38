"""
Artifact Models — Normalized release artifact records.

Defines the upstream GitHub shapes (tags, issues) and the per-platform
artifact records derived from them, plus the query used to select them.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum


class Platform(str, Enum):
    """Target platform of a server build."""

    WINDOWS = "windows"
    LINUX = "linux"


class SupportStatus(str, Enum):
    """Lifecycle tier of a build, derived from its build number."""

    RECOMMENDED = "recommended"
    LATEST = "latest"
    ACTIVE = "active"
    DEPRECATED = "deprecated"
    EOL = "eol"


SUPPORT_STATUS_DESCRIPTIONS = {
    SupportStatus.RECOMMENDED: "Fully supported, recommended for production use",
    SupportStatus.LATEST: "Most recent build, supported for testing",
    SupportStatus.ACTIVE: "Currently supported",
    SupportStatus.DEPRECATED: "Support ended, but still usable",
    SupportStatus.EOL: "End of life, not supported and may be inaccessible from server browser",
}

EOL_INFO_URL = "https://aka.cfx.re/eol"


@dataclass
class GitHubTag:
    """A tag as returned by the GitHub tags endpoint."""

    name: str
    commit_sha: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "GitHubTag":
        commit = data.get("commit") or {}
        return cls(name=data["name"] or "", commit_sha=commit.get("sha") or "")


@dataclass
class GitHubIssue:
    """An issue (or pull request) as returned by the GitHub issues endpoint."""

    number: int
    title: str
    state: str
    url: str = ""
    body: str | None = None
    labels: list[str] = field(default_factory=list)
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "GitHubIssue":
        return cls(
            number=data["number"],
            title=data.get("title", ""),
            state=data.get("state", ""),
            url=data.get("url", ""),
            body=data.get("body"),
            labels=[label["name"] for label in data.get("labels") or [] if "name" in label],
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )


@dataclass
class Artifact:
    """
    One platform-specific downloadable build.

    `version` is the build number (4th component of the tag name) kept as a
    string; `size` is an estimate in bytes.
    """

    version: str
    hash: str
    platform: Platform
    date: str
    support_status: SupportStatus
    url: str = ""
    size: int = 0


@dataclass
class ArtifactData:
    """Per-platform artifact maps keyed by version."""

    windows: dict[str, Artifact] = field(default_factory=dict)
    linux: dict[str, Artifact] = field(default_factory=dict)

    def platforms(self) -> dict[Platform, dict[str, Artifact]]:
        return {Platform.WINDOWS: self.windows, Platform.LINUX: self.linux}


@dataclass
class ArtifactEntry:
    """Flattened, platform-tagged artifact used by the query pipeline."""

    version: str
    hash: str
    platform: Platform
    date: str
    support_status: SupportStatus
    url: str
    size: int

    @classmethod
    def from_artifact(cls, version: str, artifact: Artifact, platform: Platform) -> "ArtifactEntry":
        return cls(
            version=version,
            hash=artifact.hash,
            platform=platform,
            date=artifact.date,
            support_status=artifact.support_status,
            url=artifact.url,
            size=artifact.size,
        )

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dictionary."""
        data = asdict(self)
        data["platform"] = self.platform.value
        data["support_status"] = self.support_status.value
        return data


@dataclass
class ArtifactsQuery:
    """
    Selection criteria for `ArtifactsService.get_artifacts`.

    Empty strings mean "no filter". A `limit` of 0 means the default page size.
    """

    platform: str = ""
    version: str = ""
    status: str = ""
    sort_by: str = ""
    sort_order: str = ""
    limit: int = 0
    offset: int = 0
    include_eol: bool = False


@dataclass
class ArtifactPage:
    """A page of query results along with pagination counters."""

    items: list[ArtifactEntry]
    total: int
    filtered: int
    limit: int
    offset: int

    @property
    def current_page(self) -> int:
        return self.offset // self.limit + 1 if self.limit > 0 else 1

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 1
        return -(-self.filtered // self.limit)

    def to_dict(self) -> dict:
        return {
            "data": [item.to_dict() for item in self.items],
            "pagination": {
                "limit": self.limit,
                "offset": self.offset,
                "filtered": self.filtered,
                "total": self.total,
                "currentPage": self.current_page,
                "totalPages": self.total_pages,
            },
        }


@dataclass
class PlatformSummary:
    """Per-platform statistics over the full (unfiltered) artifact set."""

    total: int = 0
    counts: dict[str, int] = field(default_factory=dict)
    latest: ArtifactEntry | None = None
    recommended: ArtifactEntry | None = None
