from __future__ import annotations

import logging
import os
import sys
from typing import Optional


_CONFIGURED = False

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# attributes every LogRecord carries; anything else came in through extra=
_RECORD_FIELDS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class ContextFormatter(logging.Formatter):
    """Append the ``extra=`` context of a record as sorted key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {k: v for k, v in vars(record).items() if k not in _RECORD_FIELDS}
        if not context:
            return line
        pairs = " ".join(f"{k}={context[k]!r}" for k in sorted(context))
        return f"{line} | {pairs}"


def setup_logging(level: Optional[str] = None, force: bool = False) -> None:
    """Send stopsync logs to stderr, keeping stdout free for the JSON result.

    The level comes from ``level``, then STOPSYNC_LOG_LEVEL, then LOG_LEVEL,
    then INFO. ``force`` replaces an earlier setup; the CLI uses it when
    --log_level is given after module import already configured logging.
    """
    global _CONFIGURED
    if _CONFIGURED and not force:
        return

    level_name = (level or os.getenv("STOPSYNC_LOG_LEVEL") or os.getenv("LOG_LEVEL") or "INFO").upper()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ContextFormatter(LOG_FORMAT))
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        handlers=[handler],
        force=force,
    )

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    setup_logging()
    return logging.getLogger(name)
