from __future__ import annotations

from collections.abc import Mapping, Sequence
import re
import shutil
from typing import Any, Optional, Protocol

import click

from .consts import CHOICE_ROW_MARGIN, MIN_CHOICE_ROWS
from .logging import log

SELECT_MESSAGE = "Which repo should be updated?"

CONFIRM_MESSAGE = (
    "Are you sure you want to change the default branch?\n"
    "This will rename the branch and update all PRs targeting that branch"
)


class Cancelled(Exception):
    """Raised when the user backs out of a prompt"""


class Prompter(Protocol):
    def multiselect(
        self, message: str, choices: Sequence[str], limit: int
    ) -> list[str]: ...

    def confirm(self, message: str) -> bool: ...

    def clear(self) -> None: ...


def choice_window() -> int:
    rows = shutil.get_terminal_size().lines
    return max(rows - CHOICE_ROW_MARGIN, MIN_CHOICE_ROWS)


def select_repositories(
    candidates: Mapping[str, Any],
    prompter: Prompter,
    limit: Optional[int] = None,
) -> list[str]:
    """
    Ask the user which of the candidate repositories to update, insisting on
    at least one, and then ask them to confirm.  Returns the selected full
    names.

    :raises Cancelled: if the user interrupts a prompt or declines to confirm
    """
    if limit is None:
        limit = choice_window()
    choices = sorted(candidates)
    try:
        selection = prompter.multiselect(SELECT_MESSAGE, choices, limit)
        while not selection:
            prompter.clear()
            log.error(
                click.style("You must select at least one repo to update", fg="red")
            )
            log.warning(
                click.style(
                    "(Enter the numbers of the repos to update, e.g. 1,3,5-7,"
                    " or 'all')",
                    dim=True,
                )
            )
            selection = prompter.multiselect(SELECT_MESSAGE, choices, limit)
        log.debug("Selected: %s", ", ".join(selection))
        if not prompter.confirm(CONFIRM_MESSAGE):
            raise Cancelled()
    except (click.Abort, KeyboardInterrupt, EOFError):
        raise Cancelled() from None
    return selection


def parse_selection(answer: str, choices: Sequence[str]) -> list[str]:
    """
    Convert a selection expression into the chosen items of ``choices``.

    The expression is a comma- and/or space-separated list of 1-based
    numbers and ranges (``3``, ``5-7``), or the word ``all``.  Tokens that
    are not valid are warned about and ignored.  Items are returned in the
    order first selected, without duplicates.
    """
    answer = answer.strip()
    if answer.lower() == "all":
        return list(choices)
    selected: list[str] = []
    for part in re.split(r"[,\s]+", answer):
        if not part:
            continue
        if m := re.fullmatch(r"(\d+)-(\d+)", part):
            indices = range(int(m[1]), int(m[2]) + 1)
        elif part.isdigit():
            indices = range(int(part), int(part) + 1)
        else:
            log.warning("Invalid selection: %s", part)
            continue
        for i in indices:
            if 1 <= i <= len(choices):
                if choices[i - 1] not in selected:
                    selected.append(choices[i - 1])
            else:
                log.warning("No repository numbered %d", i)
    return selected


class ClickPrompter:
    """
    Terminal prompts built on click.  The multi-select lists the choices
    with numbers; typing ``/TEXT`` narrows the list to the choices
    containing ``TEXT`` (case-insensitively) and a bare ``/`` shows every
    choice again.  Numbers pick from the rows shown; ``all`` picks every
    choice matching the current search, shown or not.
    """

    def multiselect(
        self, message: str, choices: Sequence[str], limit: int
    ) -> list[str]:
        shown = list(choices)
        query = ""
        while True:
            self.show_choices(shown, limit, query)
            answer = click.prompt(
                click.style(message, bold=True), default="", show_default=False
            ).strip()
            if answer.startswith("/"):
                query = answer[1:].strip()
                shown = [c for c in choices if query.lower() in c.lower()]
                continue
            if answer.lower() == "all":
                return shown
            # Only the numbered rows can be picked by number
            selected = parse_selection(answer, shown[:limit])
            if selected or not answer:
                return selected
            # Nothing valid was entered: show the choices again below the
            # warnings

    def show_choices(self, shown: Sequence[str], limit: int, query: str) -> None:
        click.echo()
        if query:
            click.secho(f"Repositories matching {query!r}:", bold=True)
        if not shown:
            click.secho("  No matching repositories", fg="yellow")
        width = len(str(len(shown)))
        for i, name in enumerate(shown[:limit], start=1):
            click.echo(f"  {click.style(str(i).rjust(width), fg='cyan')}) {name}")
        if len(shown) > limit:
            click.secho(
                f"  ... and {len(shown) - limit} more; type /TEXT to search",
                dim=True,
            )
        click.secho(
            "Enter numbers (1,3,5-7), or 'all' for every matching repo;"
            " /TEXT to search; / to list all",
            dim=True,
        )

    def confirm(self, message: str) -> bool:
        return click.confirm(click.style(message, fg="yellow"), default=False)

    def clear(self) -> None:
        click.clear()
