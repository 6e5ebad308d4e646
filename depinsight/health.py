"""Package health metrics from the npm downloads API and GitHub.

All requests of a :class:`HealthClient` share one :class:`RateLimiter`;
unauthenticated GitHub access allows 60 requests per hour, so a token
(DEPINSIGHT_GITHUB_TOKEN) is worth setting for large manifests.
"""

import re
import time
from collections import deque
from collections.abc import Callable
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx

from depinsight import __version__
from depinsight.config import Settings
from depinsight.logging import logger, progress_bar
from depinsight.manifest import Manifest, ManifestError, repository_url
from depinsight.models.reports import PackageHealth, RepositoryStats
from depinsight.store import PackageStore

DOWNLOADS_URL = "https://api.npmjs.org/downloads/point/last-month/{package}"
GITHUB_REPO_URL = "https://api.github.com/repos/{slug}"

# github.com/owner/repo in https, ssh, git:// and git+ forms
_GITHUB_URL = re.compile(
    r"github\.com[/:](?P<owner>[\w.-]+)/(?P<repo>[\w.-]+?)(?:\.git)?(?:[/#?].*)?$"
)
# npm shorthands: "github:owner/repo" and bare "owner/repo"
_GITHUB_SHORTHAND = re.compile(r"^(?:github:)?(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+?)(?:#.*)?$")


class RateLimiter:
    """Allows at most ``max_requests`` acquisitions per ``period`` seconds.

    Sliding window: each acquisition waits until the oldest of the last
    ``max_requests`` acquisitions has aged out of the window.
    """

    def __init__(
        self,
        max_requests: int,
        period: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if period <= 0:
            raise ValueError("period must be positive")
        self.max_requests = max_requests
        self.period = period
        self._clock = clock
        self._sleep = sleep
        self._stamps: deque[float] = deque()

    def acquire(self) -> None:
        now = self._clock()
        while self._stamps and now - self._stamps[0] >= self.period:
            self._stamps.popleft()
        if len(self._stamps) >= self.max_requests:
            wait = self.period - (now - self._stamps[0])
            if wait > 0:
                logger.debug("Rate limit: waiting %.2fs", wait)
                self._sleep(wait)
            self._stamps.popleft()
            now = self._clock()
        self._stamps.append(now)


def github_repo_slug(url: str | None) -> str | None:
    """``owner/repo`` for a GitHub repository URL, or None.

    >>> github_repo_slug("git+https://github.com/lodash/lodash.git")
    'lodash/lodash'
    """
    if not url:
        return None
    url = url.strip()
    match = _GITHUB_URL.search(url)
    if match is None and "://" not in url and not url.startswith(("gitlab:", "bitbucket:")):
        match = _GITHUB_SHORTHAND.match(url)
    if match is None:
        return None
    return f"{match.group('owner')}/{match.group('repo')}"


class HealthClient:
    """HTTP client for download counts and repository statistics.

    Failed lookups return None; they never raise.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
        limiter: RateLimiter | None = None,
    ) -> None:
        settings = settings or Settings()
        headers = {
            "User-Agent": f"depinsight/{__version__}",
            "Accept": "application/json",
        }
        if settings.github_token:
            headers["Authorization"] = f"Bearer {settings.github_token}"
        self._client = httpx.Client(
            timeout=settings.http_timeout,
            headers=headers,
            transport=transport,
            follow_redirects=True,
        )
        self.limiter = limiter or RateLimiter(settings.rate_limit, settings.rate_period)

    def __enter__(self) -> "HealthClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _get_json(self, url: str) -> dict[str, Any] | None:
        self.limiter.acquire()
        try:
            response = self._client.get(url)
        except httpx.HTTPError as e:
            logger.debug("Request to %s failed: %s", url, e)
            return None

        if response.status_code == 429 or (
            response.status_code == 403
            and response.headers.get("x-ratelimit-remaining") == "0"
        ):
            logger.warning("Rate limit reached for %s. Please try again later.", response.url.host)
            return None
        if response.status_code != 200:
            logger.debug("GET %s returned %d", url, response.status_code)
            return None
        try:
            data = response.json()
        except ValueError:
            return None
        return data if isinstance(data, dict) else None

    def monthly_downloads(self, package: str) -> int | None:
        """Downloads over the last month, or None when unavailable."""
        data = self._get_json(DOWNLOADS_URL.format(package=quote(package, safe="@/")))
        if data is None:
            return None
        downloads = data.get("downloads")
        return downloads if isinstance(downloads, int) else None

    def repository_stats(self, repo_url: str | None) -> RepositoryStats | None:
        """Stars, open issues and last update of a GitHub repository."""
        slug = github_repo_slug(repo_url)
        if slug is None:
            return None
        data = self._get_json(GITHUB_REPO_URL.format(slug=slug))
        if data is None:
            return None
        return RepositoryStats(
            stars=data.get("stargazers_count"),
            open_issues=data.get("open_issues_count"),
            updated_at=data.get("updated_at"),
        )


def _installed_repository(store: PackageStore, name: str) -> str | None:
    try:
        manifest = store.read_manifest(name)
    except ManifestError:
        return None
    return repository_url(manifest.get("repository"))


def check_health(
    manifest: Manifest,
    store: PackageStore,
    client: HealthClient,
    show_progress: bool = True,
) -> list[PackageHealth]:
    """Collect health metrics for every declared dependency.

    Lookups run one package at a time through the client's rate limiter;
    results follow the manifest's declared order (dependencies, then
    devDependencies).
    """
    declared = manifest.all_dependencies()
    results = []
    for name, spec in progress_bar(declared.items(), desc="Health", total=len(declared),
                                   unit="pkg", disable=not show_progress):
        results.append(
            PackageHealth(
                name=name,
                declared_range=spec,
                monthly_downloads=client.monthly_downloads(name),
                repository=client.repository_stats(_installed_repository(store, name)),
            )
        )
    return results
