"""
GitHub Fetcher — Tag and issue retrieval with cache fallback.

Fetches the tag list and the (paginated) issue list of a GitHub repository.
Successful responses are cached; when GitHub fails, any previously cached
value is served instead, however old.
"""

import asyncio
import logging
import os
from datetime import datetime, timezone
from typing import Any, TypeVar

import httpx

from artifact_harvester import __version__
from artifact_harvester.core.cache import ISSUES_CACHE_TTL_MS, TAGS_CACHE_TTL_MS, TTLCache
from artifact_harvester.core.errors import DecodeError, TransportError, UpstreamError
from artifact_harvester.models.artifact import GitHubIssue, GitHubTag

logger = logging.getLogger(__name__)

T = TypeVar("T", GitHubTag, GitHubIssue)

TAGS_CACHE_KEY = "tags"
ISSUES_CACHE_KEY = "issues"


class GitHubFetcher:
    """
    Authenticated GitHub REST client for a single repository.

    Tags come from the first page of the tags endpoint only. Issues are read
    page by page (all states) up to `MAX_ISSUE_PAGES`, pausing
    `rate_limit_delay` seconds between pages.
    """

    API_BASE_URL = "https://api.github.com"
    DEFAULT_OWNER = "citizenfx"
    DEFAULT_REPO = "fivem"

    TAGS_PER_PAGE = 100
    ISSUES_PER_PAGE = 100
    MAX_ISSUE_PAGES = 10

    TAGS_CACHE_TTL_MS = TAGS_CACHE_TTL_MS
    ISSUES_CACHE_TTL_MS = ISSUES_CACHE_TTL_MS

    RATE_LIMIT_DELAY = 1.0
    REQUEST_TIMEOUT = 30.0

    # Not consumed: failed fetches fall back to the cache instead of retrying.
    MAX_RETRIES = 3
    RETRY_DELAY = 1.0

    def __init__(
        self,
        token: str | None = None,
        owner: str = DEFAULT_OWNER,
        repo: str = DEFAULT_REPO,
        cache: TTLCache | None = None,
        timeout: float = REQUEST_TIMEOUT,
        rate_limit_delay: float = RATE_LIMIT_DELAY,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.token = token or os.environ.get("GITHUB_TOKEN")
        self.owner = owner
        self.repo = repo
        self.cache = cache if cache is not None else TTLCache()
        self.timeout = timeout
        self.rate_limit_delay = rate_limit_delay
        self.transport = transport

        self.stats: dict = {
            "total_requests": 0,
            "successful_requests": 0,
            "failed_requests": 0,
            "bytes_downloaded": 0,
            # Last X-RateLimit-* values seen, None until GitHub sends them
            "rate_limit_remaining": None,
            "rate_limit_reset": None,
        }

        if not self.token:
            logger.warning("No GITHUB_TOKEN. GitHub requests will be rate-limited.")

    @property
    def repo_url(self) -> str:
        return f"{self.API_BASE_URL}/repos/{self.owner}/{self.repo}"

    # ──────────────────────────────────────────────
    # HTTP Layer
    # ──────────────────────────────────────────────

    def _client(self) -> httpx.AsyncClient:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": f"artifact-harvester/{__version__}",
        }
        if self.token:
            headers["Authorization"] = f"token {self.token}"

        return httpx.AsyncClient(
            headers=headers,
            timeout=httpx.Timeout(self.timeout),
            transport=self.transport,
            follow_redirects=True,
        )

    async def _get_json(self, client: httpx.AsyncClient, url: str) -> Any:
        """GET a URL and decode its JSON body, raising typed errors on failure."""
        self.stats["total_requests"] += 1

        try:
            resp = await client.get(url)
        except httpx.TransportError as e:
            self.stats["failed_requests"] += 1
            raise TransportError(f"Request to {url} failed ({type(e).__name__}): {e}") from e

        self._track_rate_limit(resp)

        if not resp.is_success:
            self.stats["failed_requests"] += 1
            if resp.status_code == 403 and self.stats["rate_limit_remaining"] == 0:
                raise UpstreamError(
                    f"GitHub API rate limit exceeded. Resets at {self.rate_limit_reset_time()}",
                    status_code=resp.status_code,
                    body=resp.text,
                )
            raise UpstreamError(
                f"GitHub API error: {resp.status_code} - {resp.text}",
                status_code=resp.status_code,
                body=resp.text,
            )

        self.stats["successful_requests"] += 1
        self.stats["bytes_downloaded"] += len(resp.content)

        try:
            return resp.json()
        except ValueError as e:
            raise DecodeError(f"Invalid JSON from {url}: {e}", status_code=resp.status_code) from e

    def _track_rate_limit(self, resp: httpx.Response) -> None:
        remaining = resp.headers.get("X-RateLimit-Remaining")
        reset = resp.headers.get("X-RateLimit-Reset")
        if remaining is not None and remaining.isdigit():
            self.stats["rate_limit_remaining"] = int(remaining)
        if reset is not None and reset.isdigit():
            self.stats["rate_limit_reset"] = int(reset)

    def rate_limit_reset_time(self) -> str:
        reset = self.stats["rate_limit_reset"]
        if reset is None:
            return "unknown"
        return datetime.fromtimestamp(reset, timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    async def _wait_for_rate_limit(self) -> None:
        await asyncio.sleep(self.rate_limit_delay)

    @staticmethod
    def _decode_list(payload: Any, model: type[T], url: str) -> list[T]:
        if not isinstance(payload, list):
            raise DecodeError(f"Expected a JSON array from {url}, got {type(payload).__name__}")
        try:
            return [model.from_dict(item) for item in payload]
        except (KeyError, TypeError, AttributeError) as e:
            raise DecodeError(f"Unexpected {model.__name__} shape from {url}: {e!r}") from e

    # ──────────────────────────────────────────────
    # Tags
    # ──────────────────────────────────────────────

    async def fetch_tags(self, use_cache: bool = True) -> list[GitHubTag]:
        """
        Fetch the first page of repository tags.

        Args:
            use_cache: Return a fresh cached value without touching the network.

        Returns:
            The fetched tags, or the cached tags (fresh or stale) if the fetch fails.

        Raises:
            UpstreamError: The fetch failed and nothing was cached.
        """
        stale = self.cache.peek_entry(TAGS_CACHE_KEY)

        if use_cache:
            cached = self.cache.get(TAGS_CACHE_KEY)
            if cached is not None:
                logger.debug(f"[Tags] Using cached tags ({len(cached)})")
                return list(cached)

        url = f"{self.repo_url}/tags?per_page={self.TAGS_PER_PAGE}"
        try:
            async with self._client() as client:
                payload = await self._get_json(client, url)
            tags = self._decode_list(payload, GitHubTag, url)
        except UpstreamError as e:
            if stale is not None:
                logger.warning(f"[Tags] Fetch failed, serving cached tags: {e}")
                self.cache.restore(TAGS_CACHE_KEY, stale)
                return list(stale.data)
            raise UpstreamError(
                f"Failed to fetch GitHub tags: {e}", status_code=e.status_code, body=e.body
            ) from e

        self.cache.set(TAGS_CACHE_KEY, tags, self.TAGS_CACHE_TTL_MS)
        logger.info(f"[Tags] Fetched {len(tags)} tags from {self.owner}/{self.repo}")
        return list(tags)

    # ──────────────────────────────────────────────
    # Issues
    # ──────────────────────────────────────────────

    async def fetch_issues(self, use_cache: bool = True) -> list[GitHubIssue]:
        """
        Fetch issues in all states, page by page.

        Pagination stops on an empty page, a short page or the page cap. A
        failure on the first page falls back to the cache (or raises); a
        failure on a later page ends pagination and keeps what was collected.
        """
        stale = self.cache.peek_entry(ISSUES_CACHE_KEY)

        if use_cache:
            cached = self.cache.get(ISSUES_CACHE_KEY)
            if cached is not None:
                logger.debug(f"[Issues] Using cached issues ({len(cached)})")
                return list(cached)

        issues: list[GitHubIssue] = []
        page = 1

        async with self._client() as client:
            while page <= self.MAX_ISSUE_PAGES:
                url = (
                    f"{self.repo_url}/issues?state=all"
                    f"&per_page={self.ISSUES_PER_PAGE}&page={page}"
                )
                try:
                    payload = await self._get_json(client, url)
                    page_issues = self._decode_list(payload, GitHubIssue, url)
                except UpstreamError as e:
                    if page == 1 and not issues:
                        if stale is not None:
                            logger.warning(f"[Issues] Fetch failed, serving cached issues: {e}")
                            self.cache.restore(ISSUES_CACHE_KEY, stale)
                            return list(stale.data)
                        raise UpstreamError(
                            f"Failed to fetch GitHub issues: {e}",
                            status_code=e.status_code,
                            body=e.body,
                        ) from e
                    logger.warning(
                        f"[Issues] Page {page} failed, keeping {len(issues)} issues: {e}"
                    )
                    break

                if not page_issues:
                    break

                issues.extend(page_issues)

                if len(page_issues) < self.ISSUES_PER_PAGE:
                    break

                page += 1

                if page <= self.MAX_ISSUE_PAGES:
                    await self._wait_for_rate_limit()

        self.cache.set(ISSUES_CACHE_KEY, issues, self.ISSUES_CACHE_TTL_MS)
        logger.info(f"[Issues] Fetched {len(issues)} issues from {self.owner}/{self.repo}")
        return list(issues)
