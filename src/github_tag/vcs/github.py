"""GitHub REST API client.

Only the three calls a tagging run needs: list tags, compare two refs, and
create a tag ref. Calls are made strictly one after another and never retried;
any transport or HTTP error is raised as :class:`GitHubAPIError`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from github_tag.core.commits import Commit
from github_tag.core.tags import Tag
from github_tag.exceptions import GitHubAPIError

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
PAGE_SIZE = 100


class GitHubClient:
    """Thin synchronous client for one repository.

    Args:
        token: Token with ``contents: write`` permission; reads of public
            repositories work without one
        repository: ``owner/name``
        api_url: REST API root, overridable for GitHub Enterprise
        timeout: Per-request timeout in seconds
        transport: Custom transport (tests use ``httpx.MockTransport``)
    """

    def __init__(
        self,
        token: str | None,
        repository: str,
        api_url: str = DEFAULT_API_URL,
        *,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.repository = repository
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(
            base_url=api_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    @property
    def _repo_path(self) -> str:
        return f"/repos/{self.repository}"

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise GitHubAPIError(
                f"GitHub API {method} {url} failed with status {status}",
                status_code=status,
                hint=_hint_for_status(status),
            ) from e
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"GitHub API {method} {url} failed: {e}") from e
        return response

    def _paginate(self, url: str, params: dict[str, Any], *, follow: bool) -> list[httpx.Response]:
        responses = [self._request("GET", url, params=params)]
        while follow:
            next_link = responses[-1].links.get("next", {}).get("url")
            if not next_link:
                break
            responses.append(self._request("GET", next_link))
        return responses

    def list_tags(self, fetch_all: bool = False) -> list[Tag]:
        """List repository tags, newest first as GitHub reports them.

        Args:
            fetch_all: Follow pagination; otherwise only the first 100 tags
        """
        responses = self._paginate(
            f"{self._repo_path}/tags", {"per_page": PAGE_SIZE}, follow=fetch_all
        )
        tags = [
            Tag(name=item["name"], commit_sha=item["commit"]["sha"])
            for response in responses
            for item in response.json()
        ]
        logger.debug("Fetched %d tags from %s", len(tags), self.repository)
        return tags

    def compare_commits(self, base: str, head: str) -> list[Commit]:
        """Commits reachable from ``head`` but not from ``base``.

        Commits without a message are dropped.
        """
        responses = self._paginate(
            f"{self._repo_path}/compare/{base}...{head}", {"per_page": PAGE_SIZE}, follow=True
        )
        commits = [
            Commit(sha=item["sha"], message=item["commit"]["message"])
            for response in responses
            for item in response.json().get("commits", [])
            if item.get("commit", {}).get("message")
        ]
        logger.debug("Found %d commits between %s and %s", len(commits), base, head)
        return commits

    def create_tag(self, name: str, sha: str, *, annotated: bool = False) -> None:
        """Create ``refs/tags/<name>`` pointing at ``sha``.

        Annotated tags first create a tag object whose message is the tag name.
        """
        target = sha
        if annotated:
            logger.debug("Creating annotated tag object %s", name)
            response = self._request(
                "POST",
                f"{self._repo_path}/git/tags",
                json={"tag": name, "message": name, "object": sha, "type": "commit"},
            )
            target = response.json()["sha"]

        logger.debug("Creating tag ref refs/tags/%s -> %s", name, target)
        self._request(
            "POST",
            f"{self._repo_path}/git/refs",
            json={"ref": f"refs/tags/{name}", "sha": target},
        )


def _hint_for_status(status: int) -> str | None:
    if status in (401, 403):
        return "Check that github_token is set and has 'contents: write' permission"
    if status == 404:
        return "Check the repository name and that the refs exist"
    if status == 422:
        return "The tag may already exist"
    return None
