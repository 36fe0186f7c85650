from __future__ import annotations

from collections.abc import MutableMapping
import logging
from typing import Any, Optional

#: Level above CRITICAL; setting a logger to it silences the logger entirely
SILENT = logging.CRITICAL + 10


class PrefixedLogger(logging.LoggerAdapter):
    """
    Logs to the wrapped logger with ``PREFIX: `` in front of each message,
    so that messages about a given repository can be told apart when many
    renames are in progress at once
    """

    def __init__(self, logger: logging.Logger, prefix: Optional[str] = None) -> None:
        super().__init__(logger, {})
        self.prefix = prefix

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        if self.prefix:
            msg = f"{self.prefix}: {msg}"
        return msg, kwargs

    def sublogger(self, prefix: str) -> PrefixedLogger:
        if self.prefix is not None:
            prefix = f"{self.prefix}: {prefix}"
        return PrefixedLogger(self.logger, prefix)


log = PrefixedLogger(logging.getLogger("fix_default_branches"))


def configure_logging(log_level: str, verbose: bool, silent: bool) -> None:
    """
    Set up logging for a CLI run.  ``--silent`` wins over ``--verbose``,
    which wins over ``--log-level``.  Third-party loggers are kept at
    WARNING unless ``--verbose`` is given, in which case they log at INFO.
    """
    if silent:
        log.setLevel(SILENT)
        return
    logging.basicConfig(
        format="[%(levelname)-8s] %(message)s",
        level=logging.INFO if verbose else logging.WARNING,
    )
    if verbose:
        log.setLevel(logging.DEBUG)
        log.debug("Enabling debug logging ...")
    else:
        log.setLevel(getattr(logging, log_level.upper()))
