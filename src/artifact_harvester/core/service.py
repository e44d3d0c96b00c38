"""
Artifacts Service — Query engine over GitHub release tags.

Composes the fetcher, the tag processor and the query pipeline:

    tags (cached) -> per-platform artifacts -> filter -> sort -> paginate

The service owns its cache; two services never share state.
"""

import logging

import httpx

from artifact_harvester.core.cache import TTLCache
from artifact_harvester.core.fetcher import GitHubFetcher
from artifact_harvester.core.processor import process_tags
from artifact_harvester.core.query import (
    DEFAULT_LIMIT,
    filter_artifacts,
    flatten_artifacts,
    paginate_artifacts,
    sort_artifacts,
    summarize_artifacts,
)
from artifact_harvester.models.artifact import (
    ArtifactData,
    ArtifactEntry,
    ArtifactPage,
    ArtifactsQuery,
    GitHubIssue,
    GitHubTag,
    PlatformSummary,
)

logger = logging.getLogger(__name__)


class ArtifactsService:
    """
    Retrieves, normalizes and queries server build artifacts.

    Either pass a ready `fetcher` (whose cache the service adopts) or the
    options to build one; the fetcher and the service share `cache`.
    """

    def __init__(
        self,
        token: str | None = None,
        owner: str = GitHubFetcher.DEFAULT_OWNER,
        repo: str = GitHubFetcher.DEFAULT_REPO,
        cache: TTLCache | None = None,
        fetcher: GitHubFetcher | None = None,
        timeout: float = GitHubFetcher.REQUEST_TIMEOUT,
        rate_limit_delay: float = GitHubFetcher.RATE_LIMIT_DELAY,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if fetcher is not None and cache is not None:
            raise ValueError("Pass either fetcher or cache, not both; the fetcher owns its cache")
        if fetcher is None:
            fetcher = GitHubFetcher(
                token=token,
                owner=owner,
                repo=repo,
                cache=cache if cache is not None else TTLCache(),
                timeout=timeout,
                rate_limit_delay=rate_limit_delay,
                transport=transport,
            )
        self.fetcher = fetcher
        self.cache = fetcher.cache

    # ──────────────────────────────────────────────
    # Upstream
    # ──────────────────────────────────────────────

    async def fetch_github_tags(self, use_cache: bool = True) -> list[GitHubTag]:
        return await self.fetcher.fetch_tags(use_cache=use_cache)

    async def fetch_github_issues(self, use_cache: bool = True) -> list[GitHubIssue]:
        return await self.fetcher.fetch_issues(use_cache=use_cache)

    # ──────────────────────────────────────────────
    # Pipeline stages
    # ──────────────────────────────────────────────

    def process_github_tags(self, tags: list[GitHubTag]) -> ArtifactData:
        return process_tags(tags)

    def filter_artifacts(
        self, artifacts: list[ArtifactEntry], query: ArtifactsQuery
    ) -> list[ArtifactEntry]:
        return filter_artifacts(
            artifacts,
            platform=query.platform,
            version=query.version,
            status=query.status,
            include_eol=query.include_eol,
        )

    def sort_artifacts(
        self, artifacts: list[ArtifactEntry], sort_by: str = "", sort_order: str = ""
    ) -> list[ArtifactEntry]:
        return sort_artifacts(artifacts, sort_by, sort_order)

    def paginate_artifacts(
        self, artifacts: list[ArtifactEntry], limit: int, offset: int
    ) -> list[ArtifactEntry]:
        return paginate_artifacts(artifacts, limit, offset)

    # ──────────────────────────────────────────────
    # Queries
    # ──────────────────────────────────────────────

    async def query_artifacts(self, query: ArtifactsQuery | None = None) -> ArtifactPage:
        """Run the full pipeline and return the page along with its counters."""
        query = query or ArtifactsQuery()

        tags = await self.fetch_github_tags(use_cache=True)
        entries = flatten_artifacts(self.process_github_tags(tags))

        filtered = self.filter_artifacts(entries, query)
        ordered = self.sort_artifacts(filtered, query.sort_by, query.sort_order)

        limit = query.limit or DEFAULT_LIMIT
        items = self.paginate_artifacts(ordered, limit, query.offset)

        logger.debug(
            f"Query matched {len(filtered)}/{len(entries)} artifacts, "
            f"returning {len(items)} (offset={query.offset}, limit={limit})"
        )
        return ArtifactPage(
            items=items,
            total=len(entries),
            filtered=len(filtered),
            limit=limit,
            offset=query.offset,
        )

    async def get_artifacts(self, query: ArtifactsQuery | None = None) -> list[ArtifactEntry]:
        """
        Return the artifacts matching `query`.

        Raises:
            UpstreamError: Tags could not be fetched and nothing was cached.
        """
        page = await self.query_artifacts(query)
        return page.items

    async def summarize(self) -> dict[str, PlatformSummary]:
        """Per-platform totals, status counts, latest and recommended builds."""
        tags = await self.fetch_github_tags(use_cache=True)
        return summarize_artifacts(self.process_github_tags(tags))
