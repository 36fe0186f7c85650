from __future__ import annotations

import sys
from typing import Optional

import click
from dotenv import find_dotenv, load_dotenv

from .config import RunConfig, get_default_branch_from_git, get_github_token
from .fixer import BranchFixer
from .logging import configure_logging, log
from .selector import Cancelled, ClickPrompter


@click.command()
@click.argument("branch", required=False)
@click.option(
    "-l",
    "--log-level",
    type=click.Choice(
        ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"], case_sensitive=False
    ),
    default="INFO",
    envvar="LOG_LEVEL",
    help="Set logging level",
    show_default=True,
)
@click.option("-s", "--silent", is_flag=True, help="Suppress all log output")
@click.option(
    "--strict",
    is_flag=True,
    help="Exit with status 1 if any default branch could not be renamed",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(
    branch: Optional[str], log_level: str, silent: bool, strict: bool, verbose: bool
) -> None:
    """
    Rename the default branch of your GitHub repositories to BRANCH.

    Every repository you have access to whose default branch is not already
    named BRANCH is offered for selection; the chosen repositories then have
    their default branches renamed, which also retargets any pull requests
    based on them.  BRANCH defaults to the value of ``git config
    init.defaultBranch``.

    A GitHub token is read from the ``GITHUB_TOKEN`` environment variable
    (which may be set in a ``.env`` file) or from ``git config
    hub.oauthtoken``.
    """
    load_dotenv(find_dotenv(usecwd=True))
    configure_logging(log_level, verbose=verbose, silent=silent)
    if not branch:
        branch = get_default_branch_from_git()
    if not branch:
        log.error(click.style("Missing argument 'branch name'", fg="red"))
        log.error(
            "Usage: %s", click.style("fix-default-branches [branch name]", dim=True)
        )
        log.info(
            click.style(
                "Also, you can set the default branch globally by running:",
                fg="blue",
            )
        )
        log.info(
            click.style(
                "  $ git config --global init.defaultBranch <branch name>", dim=True
            )
        )
        sys.exit(1)
    config = RunConfig(
        branch=branch,
        strict=strict,
        github_token=get_github_token(),
    )
    try:
        rc = BranchFixer(config).run(ClickPrompter())
    except (Cancelled, KeyboardInterrupt):
        log.info("Cancelled... 👋")
        rc = 0
    except Exception as e:
        log.error(click.style("Internal error occurred", fg="red"))
        log.error("%s", e)
        log.warning(
            click.style(
                "To view more details on this error, pass the --verbose flag",
                fg="yellow",
            )
        )
        log.debug("Traceback:", exc_info=True)
        rc = 1
    sys.exit(rc)


if __name__ == "__main__":
    main()
