from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Optional

import click

from .aioutil import amap_settled
from .github import GitHub, RepositoryRecord, describe_error
from .logging import log


@dataclass(frozen=True)
class RenameOutcome:
    full_name: str
    #: Why the rename failed, or `None` if it succeeded
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RenameReport:
    outcomes: list[RenameOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> list[RenameOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[RenameOutcome]:
        return [o for o in self.outcomes if not o.ok]


async def rename_default_branches(
    gh: GitHub,
    candidates: Mapping[str, RepositoryRecord],
    selection: Sequence[str],
    new_name: str,
) -> RenameReport:
    """
    Rename the default branch of every selected repository to ``new_name``.
    All of the requests are made at once, and this returns once every one
    of them has either succeeded or failed.  A failure is logged and
    recorded in the returned report; it does not stop any other rename.
    """

    async def rename(full_name: str) -> None:
        repo = candidates[full_name]
        log.sublogger(full_name).debug(
            "Renaming default branch %r to %r", repo.default_branch, new_name
        )
        await gh.rename_branch(repo.ghrepo, repo.default_branch, new_name)

    settled = await amap_settled(rename, selection)
    report = RenameReport()
    for full_name, _ in settled.results:
        log.sublogger(full_name).debug("Default branch renamed")
        report.outcomes.append(RenameOutcome(full_name))
    for full_name, e in settled.failed:
        reason = describe_error(e)
        log.error(
            click.style(
                f"Unable to update default branch for {full_name}: {reason}",
                fg="red",
                italic=True,
            )
        )
        report.outcomes.append(RenameOutcome(full_name, error=reason))
    return report
