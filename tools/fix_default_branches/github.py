from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import aclosing
from dataclasses import InitVar, dataclass, field
from typing import Any, Optional
from urllib.parse import quote

from anyio.abc import AsyncResource
from ghrepo import GHRepo
import httpx

from .aioutil import arequest
from .consts import GITHUB_API_URL, PER_PAGE, USER_AGENT
from .logging import log
from .util import format_errors


@dataclass(frozen=True)
class RepositoryRecord:
    """The fields of a GitHub repository that the tool cares about"""

    id: int
    full_name: str
    #: Login name of the repository's owner
    owner: str
    name: str
    default_branch: str

    @classmethod
    def from_data(cls, data: dict[str, Any]) -> RepositoryRecord:
        return cls(
            id=data["id"],
            full_name=data["full_name"],
            owner=data["owner"]["login"],
            name=data["name"],
            default_branch=data["default_branch"],
        )

    @property
    def ghrepo(self) -> GHRepo:
        return GHRepo(self.owner, self.name)


@dataclass
class GitHub(AsyncResource):
    token: InitVar[Optional[str]]
    transport: InitVar[Optional[httpx.AsyncBaseTransport]] = None
    client: httpx.AsyncClient = field(init=False)

    def __post_init__(
        self, token: Optional[str], transport: Optional[httpx.AsyncBaseTransport]
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": USER_AGENT,
        }
        if token is not None:
            headers["Authorization"] = f"token {token}"
        else:
            log.debug("No GitHub token available; making unauthenticated requests")
        self.client = httpx.AsyncClient(
            base_url=GITHUB_API_URL,
            headers=headers,
            follow_redirects=True,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def paginate(
        self, path: str, params: Optional[dict] = None
    ) -> AsyncGenerator[Any, None]:
        """
        GET the path, yield the items in the JSON array in the response, and
        repeat with the ``rel="next"`` URL from the ``Link`` header until
        there is none.
        """
        r = await arequest(self.client, "GET", path, params=params)
        while True:
            for item in r.json():
                yield item
            if (nxt := r.links.get("next")) is not None:
                r = await arequest(self.client, "GET", nxt["url"])
            else:
                break

    async def get_user_repos(self) -> AsyncGenerator[RepositoryRecord, None]:
        async with aclosing(
            self.paginate("/user/repos", params={"per_page": PER_PAGE})
        ) as ait:
            async for data in ait:
                yield RepositoryRecord.from_data(data)

    async def rename_branch(self, repo: GHRepo, branch: str, new_name: str) -> None:
        log.debug("Renaming branch %r of %s to %r", branch, repo, new_name)
        # Renames are not idempotent, so only one attempt is ever made
        await arequest(
            self.client,
            "POST",
            f"{repo.api_url}/branches/{quote(branch)}/rename",
            json={"new_name": new_name},
            retry=False,
        )


def describe_error(e: Exception) -> str:
    """
    Produce a human-readable description of an error raised while talking to
    GitHub, using the message from the response body when there is one
    """
    if isinstance(e, httpx.HTTPStatusError):
        r = e.response
        try:
            data = r.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and data.get("message"):
            msg = f"{r.status_code}: {data['message']}"
            details = [
                err["message"]
                for err in data.get("errors", [])
                if isinstance(err, dict) and err.get("message")
            ]
            return msg + format_errors(details)
        return f"{r.status_code} {r.reason_phrase} for {r.request.method} {r.url}"
    return f"{type(e).__name__}: {e}"
