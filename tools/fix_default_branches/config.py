from __future__ import annotations

import os
import subprocess
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .logging import log


class RunConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    #: The name that every selected repository's default branch is renamed to
    branch: str = Field(min_length=1)
    #: Exit nonzero if any rename failed
    strict: bool = False
    github_token: Optional[str] = Field(default=None, repr=False)


def read_git_config(key: str) -> Optional[str]:
    """
    Return the value of a global git configuration key, or `None` if it is
    unset or git is not available
    """
    try:
        value = subprocess.run(
            ["git", "config", key],
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
        ).stdout.strip()
    except (OSError, subprocess.CalledProcessError):
        log.debug("Could not read git config %s", key)
        return None
    return value or None


def get_default_branch_from_git() -> Optional[str]:
    return read_git_config("init.defaultBranch")


def get_github_token() -> Optional[str]:
    if token := os.environ.get("GITHUB_TOKEN"):
        return token
    return read_git_config("hub.oauthtoken")
