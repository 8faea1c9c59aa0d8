# Chatmark project, MIT license.
#
# You're free to copy this file to your project and edit it for your needs,
# just keep this copyright line please :3

"""
The parsing engine.

:class:`Parser` owns an ordered list of :class:`~chatmark.rule.Rule` objects
and turns a string into a :class:`Forest` of nodes:

>>> from chatmark.parser import parse
>>> forest = parse("**bar _foo_**")
>>> print(forest.dump())
(Bold
  (Text 'bar ')
  (Italic
    (Text 'foo')))


How it works
------------

The parser keeps a stack of pending frames. Each frame is a span of the source
and the node that should receive whatever is found in that span (or the forest
itself for top-level frames).

For every frame, rules are tried against the frame's window in order. The first
rule that matches creates a node, which is attached to the frame's parent.
Then two frames may be pushed: one for the rest of the window after the match,
and, if the match is nonterminal, one for the node's own content. The latter
is pushed last, so the node's subtree is resolved before the parser moves on
to its siblings.

If no rule matches a window, the rest of that window is dropped. Nodes that
were already built are kept. Dropped spans are listed
in :attr:`Forest.unmatched`, strict parsers raise
:class:`~chatmark.errors.NoRuleMatched` instead.

Offsets are Python string indices, i.e. they count code points.

"""

from __future__ import annotations

from dataclasses import dataclass

import chatmark
import chatmark.config
import chatmark.errors
import chatmark.node
import chatmark.render
import chatmark.rule
import chatmark.rules
from chatmark import _typing as _t

__all__ = [
    "Forest",
    "Frame",
    "Parser",
    "parse",
]


@dataclass(**chatmark._with_slots())
class Frame:
    """
    A span of the source that is still waiting to be parsed.

    """

    parent: chatmark.node.Node | None
    """
    Node that receives results, :data:`None` for top-level frames.

    """

    start: int
    end: int


class Forest:
    """
    Ordered top-level nodes produced by a parse.

    Forest behaves like a read-only list of nodes.

    """

    def __init__(
        self, source: str, nodes: list[chatmark.node.Node] | None = None
    ):
        self.source: str = source
        """
        The text that was parsed.

        """

        self.nodes: list[chatmark.node.Node] = nodes if nodes is not None else []
        """
        Top-level nodes, in the order they appear in the source.

        """

        self.unmatched: list[chatmark.errors.NoRuleMatched] = []
        """
        Spans of the source that were dropped because no rule matched them.

        """

    def __iter__(self) -> _t.Iterator[chatmark.node.Node]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    @_t.overload
    def __getitem__(self, index: int, /) -> chatmark.node.Node: ...
    @_t.overload
    def __getitem__(self, index: slice, /) -> list[chatmark.node.Node]: ...
    def __getitem__(self, index, /):
        return self.nodes[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Forest):
            return self.nodes == other.nodes
        if isinstance(other, list):
            return self.nodes == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"Forest({self.nodes!r})"

    @property
    def is_complete(self) -> bool:
        """
        :data:`True` if every character of the source ended up in some node.

        """

        return not self.unmatched

    def dump(self) -> str:
        """
        Dump all top-level nodes, one after another.

        """

        return "\n".join(node.dump() for node in self.nodes)

    def as_markdown(self) -> str:
        """
        Render this forest back to markdown.

        """

        return chatmark.render.as_markdown(self)


class Parser:
    """
    Drives an ordered list of rules over the input.

    :param rules:
        rules to try, in order of priority. The first rule that matches
        a window wins, regardless of how much text other rules would match.
    :param strict:
        raise :class:`~chatmark.errors.NoRuleMatched` instead of dropping text
        that no rule accepts.

    """

    def __init__(
        self, rules: _t.Iterable[chatmark.rule.Rule], /, *, strict: bool = False
    ):
        self.__rules = list(rules)
        self.__strict = strict

    @classmethod
    def from_config(cls, config: chatmark.config.ParserConfig, /) -> Parser:
        """
        Create a parser with markdown rules selected by the given config.

        """

        return cls(chatmark.rules.default_rules(config.rules), strict=config.strict)

    @property
    def rules(self) -> list[chatmark.rule.Rule]:
        """
        Rules of this parser, in order of priority.

        """

        return list(self.__rules)

    @property
    def strict(self) -> bool:
        return self.__strict

    def parse(self, source: str, /) -> Forest:
        """
        Parse the given text.

        """

        context = chatmark.rule.ParseContext(source)
        forest = Forest(source)
        stack: list[Frame] = []

        if source:
            stack.append(Frame(None, 0, len(source)))

        while stack:
            frame = stack.pop()

            if frame.start >= frame.end:
                continue

            window = source[frame.start : frame.end]
            offset = frame.start
            context.offset = offset

            for rule in self.__rules:
                if not rule.gate(context.previous, context):
                    continue
                capture = rule.match(window)
                if capture is None:
                    continue
                if capture.end == 0:
                    raise chatmark.errors.RuleError(
                        f"{rule!r} produced an empty match at {offset}"
                    )

                matched_end = offset + capture.end
                spec = rule.build(capture, context)
                context.previous = capture.text()

                if spec.node is not None:
                    spec.node.start = offset
                    spec.node.end = matched_end
                    if frame.parent is not None:
                        frame.parent.add_child(spec.node)
                    else:
                        forest.nodes.append(spec.node)

                if matched_end < frame.end:
                    stack.append(Frame(frame.parent, matched_end, frame.end))

                if not spec.is_terminal:
                    spec.shift(offset)
                    # Content of a nonterminal without a node belongs
                    # to the current parent.
                    parent = spec.node if spec.node is not None else frame.parent
                    stack.append(Frame(parent, spec.start, spec.end))

                chatmark._logger.debug(
                    "%s matched %r at %s:%s",
                    rule.name,
                    capture.text(),
                    offset,
                    matched_end,
                )
                break
            else:
                error = chatmark.errors.NoRuleMatched(frame.start, frame.end, window)
                if self.__strict:
                    raise error
                chatmark._logger.debug("dropped unmatched text: %s", error)
                forest.unmatched.append(error)

        return forest


def parse(
    source: str,
    /,
    *,
    rules: _t.Iterable[chatmark.rule.Rule] | None = None,
    strict: bool = False,
) -> Forest:
    """
    Parse a string with the given rules, or with the default markdown rules.

    """

    if rules is None:
        rules = chatmark.rules.default_rules()
    return Parser(rules, strict=strict).parse(source)
