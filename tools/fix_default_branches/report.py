from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import click

from .logging import log
from .renamer import RenameReport
from .util import quantify


def report_candidates(total: int, candidates: Mapping[str, Any]) -> None:
    log.info("You have %s in total", click.style(quantify(total, "repo"), bold=True))
    log.info(
        "You have %s that could be updated",
        click.style(quantify(len(candidates), "repo"), bold=True),
    )


def report_nothing_to_do(branch: str) -> None:
    log.info(
        "Nothing to update: every repo already uses %s as its default branch",
        click.style(branch, bold=True),
    )


def report_outcomes(report: RenameReport) -> None:
    failed = report.failed
    log.info(
        "Renamed default branch on %d of %s",
        len(report.succeeded),
        quantify(len(report.outcomes), "repository", "repositories"),
    )
    if failed:
        qty = quantify(len(failed), "repository", "repositories")
        log.warning(click.style(f"Could not update {qty}:", fg="yellow"))
        for o in sorted(failed, key=lambda o: o.full_name):
            log.warning("  - %s: %s", o.full_name, o.error)
    log.info("Update complete. Please give it a moment to completely take effect.")
