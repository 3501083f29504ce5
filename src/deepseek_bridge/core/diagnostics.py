"""core.diagnostics

Side-channel logging that can never break a call.

Handlers belong to the host; a misbehaving one (closed stream, broken
formatter, ...) must not change what the adapter returns or raises.
"""

from __future__ import annotations

import contextlib
import logging
from typing import Any


def safe_log(logger: logging.Logger | None, level: int, message: str, /, **fields: Any) -> None:  # noqa: ANN401
    """Emit *message* with structured *fields* attached as ``extra``.

    Failures anywhere in the logging stack are swallowed.
    """
    if logger is None:
        return
    with contextlib.suppress(Exception):
        if fields:
            logger.log(level, '%s %s', message, fields, extra={'deepseek': fields})
        else:
            logger.log(level, message)


def safe_debug(logger: logging.Logger | None, message: str, /, **fields: Any) -> None:  # noqa: ANN401
    safe_log(logger, logging.DEBUG, message, **fields)


def safe_error(logger: logging.Logger | None, message: str, /, **fields: Any) -> None:  # noqa: ANN401
    safe_log(logger, logging.ERROR, message, **fields)
