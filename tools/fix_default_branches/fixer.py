from __future__ import annotations

from collections.abc import Mapping, Sequence
from contextlib import aclosing
from dataclasses import dataclass

import anyio

from .candidates import find_candidates
from .config import RunConfig
from .github import GitHub, RepositoryRecord
from .logging import log
from .renamer import RenameReport, rename_default_branches
from .report import report_candidates, report_nothing_to_do, report_outcomes
from .selector import Prompter, select_repositories


@dataclass
class BranchFixer:
    """
    Runs the whole workflow: list the user's repositories, pick out those
    with the wrong default branch name, let the user choose which to fix,
    and rename the chosen repositories' default branches
    """

    config: RunConfig

    def github(self) -> GitHub:
        return GitHub(self.config.github_token)

    async def get_candidates(self) -> Mapping[str, RepositoryRecord]:
        async with self.github() as gh:
            async with aclosing(gh.get_user_repos()) as ait:
                repos = [r async for r in ait]
        candidates = find_candidates(repos, self.config.branch)
        report_candidates(len(repos), candidates)
        return candidates

    async def rename(
        self, candidates: Mapping[str, RepositoryRecord], selection: Sequence[str]
    ) -> RenameReport:
        async with self.github() as gh:
            return await rename_default_branches(
                gh, candidates, selection, self.config.branch
            )

    def run(self, prompter: Prompter) -> int:
        """
        Returns the process exit status.

        The prompts are run outside of any event loop, between the listing
        and the renaming, so that an interrupt at a prompt is delivered to
        the prompt immediately.

        :raises Cancelled: if the user cancels at a prompt
        """
        candidates = anyio.run(self.get_candidates)
        if not candidates:
            report_nothing_to_do(self.config.branch)
            return 0
        selection = select_repositories(candidates, prompter)
        report = anyio.run(self.rename, candidates, selection)
        report_outcomes(report)
        if report.failed and self.config.strict:
            log.debug("Exiting nonzero due to --strict")
            return 1
        return 0
