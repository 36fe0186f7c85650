from __future__ import annotations

import random
from typing import Iterator, Optional

from .consts import RETRY_ATTEMPTS


def quantify(qty: int, singular: str, plural: Optional[str] = None) -> str:
    if qty == 1:
        return f"{qty} {singular}"
    elif plural is None:
        return f"{qty} {singular}s"
    else:
        return f"{qty} {plural}"


def format_errors(messages: list[str]) -> str:
    """Render error details as indented lines to append below a summary"""
    return "".join(f"\n    {m}" for m in messages)


def exp_wait(
    attempts: int = RETRY_ATTEMPTS, base: float = 2, jitter: float = 0.1
) -> Iterator[float]:
    """
    Yield ``attempts`` retry delays in seconds: 1, ``base``, ``base**2``, and
    so on, each scaled by a random factor within ``jitter / 2`` of 1.
    """
    for n in range(attempts):
        yield base**n * (1 + (random.random() - 0.5) * jitter)
