from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass, field
import json
import logging
import re
from typing import Any, Optional, Union

import anyio
import httpx
import pytest

from fix_default_branches import aioutil
from fix_default_branches.github import GitHub

TOKEN = "test-token"


def repo_data(full_name: str, default_branch: str, id: int = 0) -> dict[str, Any]:
    """Construct a (trimmed-down) repository object as returned by GitHub"""
    owner, name = full_name.split("/")
    return {
        "id": id or abs(hash(full_name)) % 10**8,
        "node_id": "R_" + name,
        "name": name,
        "full_name": full_name,
        "private": False,
        "owner": {"login": owner, "id": 1, "type": "User"},
        "html_url": f"https://github.com/{full_name}",
        "default_branch": default_branch,
    }


@dataclass
class FakeGitHubAPI:
    """
    A stand-in for the parts of the GitHub REST API used by the tool, for use
    with `httpx.MockTransport`
    """

    repos: list[dict[str, Any]] = field(default_factory=list)
    page_size: int = 2
    #: Mapping from full names of repositories whose renames are rejected to
    #: the status codes to reject them with
    failing: dict[str, int] = field(default_factory=dict)
    #: Full names of repositories whose renames raise a connection error
    unreachable: set[str] = field(default_factory=set)
    #: Mapping from full names to (old branch, new branch) pairs for every
    #: successful rename
    renamed: dict[str, tuple[str, str]] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)
    #: If set, rename requests are held until this many are in progress at
    #: once
    barrier: Optional[int] = None
    in_flight: int = field(init=False, default=0)
    max_in_flight: int = field(init=False, default=0)
    _arrived: Optional[anyio.Event] = field(init=False, default=None)

    def add_repo(self, full_name: str, default_branch: str) -> None:
        self.repos.append(repo_data(full_name, default_branch, len(self.repos) + 1))

    @property
    def list_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/user/repos"]

    @property
    def rename_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith("/rename")]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.headers.get("Authorization") != f"token {TOKEN}":
            return httpx.Response(401, json={"message": "Bad credentials"})
        if request.method == "GET" and request.url.path == "/user/repos":
            return self.list_repos(request)
        if request.method == "POST" and (
            m := re.fullmatch(
                r"/repos/([^/]+)/([^/]+)/branches/(.+)/rename", request.url.path
            )
        ):
            full_name = f"{m[1]}/{m[2]}"
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            try:
                if self.barrier is not None:
                    if self._arrived is None:
                        self._arrived = anyio.Event()
                    if self.in_flight >= self.barrier:
                        self._arrived.set()
                    await self._arrived.wait()
                return self.rename(request, full_name, m[3])
            finally:
                self.in_flight -= 1
        return httpx.Response(404, json={"message": "Not Found"})

    def list_repos(self, request: httpx.Request) -> httpx.Response:
        page = int(request.url.params.get("page", "1"))
        start = (page - 1) * self.page_size
        headers = {}
        if start + self.page_size < len(self.repos):
            nxt = request.url.copy_merge_params({"page": str(page + 1)})
            headers["Link"] = f'<{nxt}>; rel="next"'
        return httpx.Response(
            200, json=self.repos[start : start + self.page_size], headers=headers
        )

    def rename(
        self, request: httpx.Request, full_name: str, branch: str
    ) -> httpx.Response:
        if full_name in self.unreachable:
            raise httpx.ConnectError("Connection refused", request=request)
        if (status := self.failing.get(full_name)) is not None:
            return httpx.Response(
                status, json={"message": "Resource not accessible by integration"}
            )
        for data in self.repos:
            if data["full_name"] == full_name and data["default_branch"] == branch:
                new_name = json.loads(request.content)["new_name"]
                data["default_branch"] = new_name
                self.renamed[full_name] = (branch, new_name)
                return httpx.Response(201, json={"name": new_name})
        return httpx.Response(404, json={"message": "Branch not found"})


@dataclass
class ScriptedPrompter:
    """A prompter that plays back canned answers"""

    #: Successive answers to the multi-select; an exception is raised instead
    #: of being returned
    selections: list[Union[list[str], BaseException]] = field(default_factory=list)
    confirmation: Union[bool, BaseException] = True
    choices: list[str] = field(default_factory=list)
    limits: list[int] = field(default_factory=list)
    multiselect_calls: int = 0
    confirm_calls: int = 0
    clears: int = 0

    def multiselect(
        self, message: str, choices: Sequence[str], limit: int
    ) -> list[str]:
        self.multiselect_calls += 1
        self.choices = list(choices)
        self.limits.append(limit)
        answer = self.selections.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    def confirm(self, message: str) -> bool:
        self.confirm_calls += 1
        if isinstance(self.confirmation, BaseException):
            raise self.confirmation
        return self.confirmation

    def clear(self) -> None:
        self.clears += 1


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def capture_all_logs(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="fix_default_branches")


@pytest.fixture
def fake_api() -> FakeGitHubAPI:
    return FakeGitHubAPI()


@pytest.fixture
async def github(fake_api: FakeGitHubAPI) -> AsyncIterator[GitHub]:
    async with GitHub(TOKEN, transport=httpx.MockTransport(fake_api.handler)) as gh:
        yield gh


@pytest.fixture
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Make retry backoff instantaneous, recording the requested delays"""
    delays: list[float] = []

    async def sleep(delay: float) -> None:
        delays.append(delay)

    monkeypatch.setattr(aioutil.anyio, "sleep", sleep)
    return delays
