# Chatmark project, MIT license.
#
# You're free to copy this file to your project and edit it for your needs,
# just keep this copyright line please :3

"""
Exceptions raised by the parsing engine, rules and configuration.

"""

from __future__ import annotations

__all__ = [
    "ChatmarkError",
    "ConfigError",
    "NoRuleMatched",
    "RuleError",
]


class ChatmarkError(Exception):
    """
    Base class for all errors raised by this package.

    """


class NoRuleMatched(ChatmarkError):
    """
    Raised when no rule accepts a window of the input.

    By default the parser does not raise this error. Instead, the unmatched
    span is dropped, and the error is recorded
    in :attr:`Forest.unmatched <chatmark.parser.Forest.unmatched>`.
    Strict parsers raise it.

    """

    def __init__(self, start: int, end: int, text: str = ""):
        self.start = start
        self.end = end
        self.text = text
        super().__init__(f"no rule matched text at {start}:{end}: {text!r}")


class RuleError(ChatmarkError):
    """
    Raised when a rule violates its contract, i.e. asks for a capture group
    that its pattern does not have, or produces an empty match.

    This always signals a broken rule rather than a bad input.

    """


class ConfigError(ChatmarkError, ValueError):
    """
    Raised when parser configuration is invalid.

    """
