# Chatmark project, MIT license.
#
# You're free to copy this file to your project and edit it for your needs,
# just keep this copyright line please :3

"""
Chatmark is a small rule-driven parser for chat-flavored markdown.

The engine lives in :mod:`chatmark.parser`; it knows nothing about markdown
and only drives an ordered list of :class:`~chatmark.rule.Rule` objects over
the input. The markdown dialect itself is a set of such rules,
see :mod:`chatmark.rules`, and :mod:`chatmark.render` turns a parsed tree back
into text.

"""

from __future__ import annotations

import logging as _logging
import os as _os
import sys as _sys
import warnings

from chatmark import _typing as _t

__version__ = "0.1.0"

__all__ = [
    "ChatmarkWarning",
    "enable_internal_logging",
]


class ChatmarkWarning(RuntimeWarning):
    """
    Base class for all runtime warnings.

    """


def _with_slots() -> dict[str, bool]:
    return {"slots": True}


_logger = _logging.getLogger("chatmark.internal")
_logger.propagate = False

__stderr_handler = _logging.StreamHandler(_sys.__stderr__)
__stderr_handler.setLevel("CRITICAL")
_logger.addHandler(__stderr_handler)


def _parse_level(level: str | int | None) -> str | int:
    if level is None:
        level = _os.environ.get("CHATMARK_DEBUG", "").strip().upper() or "DEBUG"
    if level in ["1", "Y", "YES", "TRUE"]:
        level = "DEBUG"
    return level


def enable_internal_logging(
    path: str | None = None,
    level: str | int | None = None,
    propagate: bool | None = None,
):
    """
    Enable Chatmark's internal logging.

    This function enables :func:`logging.captureWarnings`, enables printing
    of :class:`ChatmarkWarning` messages, and lowers the level of the
    ``chatmark.internal`` channel so that engine traces are emitted.

    :param path:
        if given, adds a handler that outputs internal log messages
        to the given file.
    :param level:
        logging level for the internal channel. Default is taken
        from ``CHATMARK_DEBUG``, falling back to ``DEBUG``.
    :param propagate:
        if given, enables or disables log message propagation
        from ``chatmark.internal`` and ``py.warnings`` to the root logger.

    """

    level = _parse_level(level)
    _logger.setLevel(level)

    if path:
        file_handler = _logging.FileHandler(path, delay=True)
        file_handler.setFormatter(
            _logging.Formatter("%(filename)s:%(lineno)d: %(levelname)s: %(message)s")
        )
        file_handler.setLevel(level)
        _logger.addHandler(file_handler)
        _logging.getLogger("py.warnings").addHandler(file_handler)

    _logging.captureWarnings(True)
    warnings.simplefilter("default", category=ChatmarkWarning)

    if propagate is not None:
        _logging.getLogger("py.warnings").propagate = propagate
        _logger.propagate = propagate


_debug = "CHATMARK_DEBUG" in _os.environ or "CHATMARK_DEBUG_FILE" in _os.environ
if _debug:  # pragma: no cover
    enable_internal_logging(
        path=_os.environ.get("CHATMARK_DEBUG_FILE") or "chatmark.log",
        propagate=False,
    )
else:
    warnings.simplefilter("ignore", category=ChatmarkWarning, append=True)
