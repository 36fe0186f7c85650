from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .github import RepositoryRecord


def find_candidates(
    repos: Iterable[RepositoryRecord], branch: str
) -> Mapping[str, RepositoryRecord]:
    """
    Return a read-only mapping from full names to records for those
    repositories whose default branch is not already named ``branch``
    """
    return MappingProxyType(
        {r.full_name: r for r in repos if r.default_branch != branch}
    )
