# Chatmark project, MIT license.
#
# You're free to copy this file to your project and edit it for your needs,
# just keep this copyright line please :3

"""
The rule contract.

A rule recognizes one construct at the very beginning of a text window.
The parser tries rules in order and commits to the first one that matches,
so more specific rules must come before generic fallbacks.

Most rules are backed by a regular expression; for them, subclass
:class:`RegexRule` and implement :meth:`~Rule.build`:

.. code-block:: python

   import re

   from chatmark.node import Text
   from chatmark.parse_spec import ParseSpec
   from chatmark.rule import Capture, ParseContext, RegexRule


   class Word(RegexRule):
       pattern = re.compile(r"\\w+")

       def build(self, capture: Capture, context: ParseContext) -> ParseSpec:
           return ParseSpec.terminal(Text(capture.text()), *capture.span())

Rules must not keep per-parse state in their own fields. Anything a rule needs
to remember between matches goes to :attr:`ParseContext.state`, which is
created anew for every call to :meth:`Parser.parse <chatmark.parser.Parser.parse>`.

"""

from __future__ import annotations

import abc
import dataclasses
import re
from dataclasses import dataclass

import chatmark
import chatmark.errors
import chatmark.parse_spec
from chatmark import _typing as _t

__all__ = [
    "Capture",
    "ParseContext",
    "RegexRule",
    "Rule",
]


@dataclass(**chatmark._with_slots())
class ParseContext:
    """
    Mutable state of a single parse.

    """

    source: str
    """
    The whole text being parsed.

    """

    offset: int = 0
    """
    Absolute offset of the window that is currently being matched.

    """

    previous: str | None = None
    """
    Text of the most recent successful match, :data:`None` before
    the first one.

    """

    state: dict[str, _t.Any] = dataclasses.field(default_factory=dict)
    """
    Scratch space for rules that need to remember something between matches.

    """


class Capture:
    """
    Result of matching a rule against a window.

    Offsets are relative to the window. Asking for a group that the pattern
    doesn't declare, or that didn't participate in the match,
    raises :class:`~chatmark.errors.RuleError`.

    """

    def __init__(self, match: re.Match[str], /):
        self.__match = match

    @property
    def match(self) -> re.Match[str]:
        """
        The underlying regular expression match.

        """

        return self.__match

    @property
    def end(self) -> int:
        """
        End of the whole match.

        """

        return self.__match.end()

    def has(self, group: int | str, /) -> bool:
        """
        Check whether the given group participated in the match.

        """

        try:
            return self.__match.start(group) != -1
        except IndexError:
            raise chatmark.errors.RuleError(
                f"pattern {self.__match.re.pattern!r} has no group {group!r}"
            ) from None

    def span(self, group: int | str = 0, /) -> tuple[int, int]:
        """
        Return start and end of the given group.

        """

        if not self.has(group):
            raise chatmark.errors.RuleError(
                f"group {group!r} of pattern {self.__match.re.pattern!r} "
                f"did not participate in the match"
            )
        return self.__match.span(group)

    def text(self, group: int | str = 0, /) -> str:
        """
        Return text of the given group.

        """

        start, end = self.span(group)
        return self.__match.string[start:end]

    def __repr__(self) -> str:
        return f"Capture({self.__match!r})"


class Rule(abc.ABC):
    """
    Base class for parsing rules.

    """

    @property
    def name(self) -> str:
        """
        Name of the rule, used in configs and logs.

        """

        return self.__class__.__name__

    def gate(self, previous: str | None, context: ParseContext, /) -> bool:
        """
        Decide whether this rule may be tried at the current position.

        :param previous:
            text of the previous successful match, or :data:`None`
            if nothing was matched yet.
        :param context:
            state of the current parse.

        """

        return True

    @abc.abstractmethod
    def match(self, window: str, /) -> Capture | None:
        """
        Match this rule against the beginning of ``window``.

        Rules must not scan ahead: a match that doesn't start at offset ``0``
        is not a match.

        """

    @abc.abstractmethod
    def build(
        self, capture: Capture, context: ParseContext, /
    ) -> chatmark.parse_spec.ParseSpec:
        """
        Turn a successful match into a :class:`~chatmark.parse_spec.ParseSpec`.

        Offsets in the returned spec are relative to the matched window.

        """

    def __repr__(self) -> str:
        return f"<rule {self.name}>"


class RegexRule(Rule, abc.ABC):
    """
    Rule that matches a regular expression.

    Subclasses set :attr:`pattern`; it is matched with :meth:`re.Pattern.match`,
    so it is always anchored at the start of the window.

    """

    pattern: _t.ClassVar[re.Pattern[str]]
    """
    Compiled pattern for this rule.

    """

    def match(self, window: str, /) -> Capture | None:
        if match := self.pattern.match(window):
            return Capture(match)
        return None
