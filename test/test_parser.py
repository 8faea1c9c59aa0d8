import logging
import re
from dataclasses import dataclass

import pytest

from chatmark import _typing as _t
from chatmark.errors import NoRuleMatched, RuleError
from chatmark.node import BlockQuote, Container, Leaf, Node, SingleBlockQuote
from chatmark.parse_spec import ParseSpec
from chatmark.parser import Forest, Parser, parse
from chatmark.rule import Capture, ParseContext, RegexRule
from chatmark.rules import default_rules


@dataclass
class Group(Container):
    pass


@dataclass
class Word(Leaf):
    text: str


class Letter(RegexRule):
    pattern = re.compile(r"[a-z]")

    def build(self, capture: Capture, context: ParseContext) -> ParseSpec:
        return ParseSpec.terminal(Word(capture.text()), *capture.span())


class Letters(RegexRule):
    pattern = re.compile(r"[a-z]+")

    def build(self, capture: Capture, context: ParseContext) -> ParseSpec:
        return ParseSpec.terminal(Word(capture.text()), *capture.span())


class Paren(RegexRule):
    pattern = re.compile(r"\((?P<inner>[^()]*)\)")

    def build(self, capture: Capture, context: ParseContext) -> ParseSpec:
        return ParseSpec.nonterminal(Group(), *capture.span("inner"))


class GreedyParen(RegexRule):
    pattern = re.compile(r"\((?P<inner>.*)\)")

    def build(self, capture: Capture, context: ParseContext) -> ParseSpec:
        return ParseSpec.nonterminal(Group(), *capture.span("inner"))


class Bracket(RegexRule):
    pattern = re.compile(r"\[(?P<inner>[^\]]*)\]")

    def build(self, capture: Capture, context: ParseContext) -> ParseSpec:
        return ParseSpec.nonterminal(None, *capture.span("inner"))


class Skip(RegexRule):
    pattern = re.compile(r"\s+")

    def build(self, capture: Capture, context: ParseContext) -> ParseSpec:
        return ParseSpec.terminal(None, *capture.span())


class Quoted(RegexRule):
    pattern = re.compile(r"'(?P<inner>[^']*)'")

    def build(self, capture: Capture, context: ParseContext) -> ParseSpec:
        node = Word(capture.text("inner"))
        return ParseSpec.nonterminal(node, *capture.span("inner"))


class Empty(RegexRule):
    pattern = re.compile(r"x*")

    def build(self, capture: Capture, context: ParseContext) -> ParseSpec:
        return ParseSpec.terminal(None, 0, 0)


class Broken(RegexRule):
    pattern = re.compile(r"!")

    def build(self, capture: Capture, context: ParseContext) -> ParseSpec:
        return ParseSpec.terminal(Word("!"), *capture.span("content"))


class Recorder(Letter):
    def __init__(self):
        self.calls: list[tuple[str | None, int]] = []

    def gate(self, previous: str | None, context: ParseContext) -> bool:
        self.calls.append((previous, context.offset))
        return True


def words(*text: str) -> list[Node]:
    return [Word(t) for t in text]


class TestParser:
    def test_empty_input(self):
        forest = Parser([Letter()]).parse("")
        assert list(forest) == []
        assert forest.unmatched == []
        assert forest.is_complete

    def test_no_rules(self):
        forest = Parser([]).parse("abc")
        assert list(forest) == []
        assert len(forest.unmatched) == 1

    def test_no_match_at_start(self):
        forest = Parser([Letter(), Paren()]).parse("1abc")
        assert list(forest) == []
        assert not forest.is_complete
        [error] = forest.unmatched
        assert (error.start, error.end, error.text) == (0, 4, "1abc")

    def test_terminals(self):
        forest = Parser([Letter()]).parse("abc")
        assert forest == words("a", "b", "c")
        assert [(n.start, n.end) for n in forest] == [(0, 1), (1, 2), (2, 3)]

    def test_nesting(self):
        forest = Parser([Letter(), GreedyParen()]).parse("(ab(c))d")
        assert forest == [
            Group(items=[*words("a", "b"), Group(items=words("c"))]),
            Word("d"),
        ]

    def test_spans(self):
        forest = Parser([Letter(), GreedyParen()]).parse("(ab(c))d")
        outer, d = forest
        assert (outer.start, outer.end) == (0, 7)
        assert (d.start, d.end) == (7, 8)
        a, b, inner = outer.children()
        assert (a.start, a.end) == (1, 2)
        assert (b.start, b.end) == (2, 3)
        assert (inner.start, inner.end) == (3, 6)
        [c] = inner.children()
        assert (c.start, c.end) == (4, 5)

    def test_siblings(self):
        forest = Parser([Letter(), Paren()]).parse("(ab)(c)d")
        assert forest == [
            Group(items=words("a", "b")),
            Group(items=words("c")),
            Word("d"),
        ]

    def test_empty_frame_keeps_continuation(self):
        forest = Parser([Letter(), Paren()]).parse("()x(y)()z")
        assert forest == [
            Group(),
            Word("x"),
            Group(items=words("y")),
            Group(),
            Word("z"),
        ]
        assert forest.is_complete

    def test_match_without_node(self):
        forest = Parser([Letter(), Skip()]).parse("a b  c")
        assert forest == words("a", "b", "c")
        assert forest.is_complete

    def test_nonterminal_without_node(self):
        forest = Parser([Letter(), Paren(), Bracket()]).parse("([ab]c)[d]")
        assert forest == [
            Group(items=words("a", "b", "c")),
            Word("d"),
        ]

    def test_nonterminal_leaf(self):
        forest = Parser([Letter(), Quoted()]).parse("'ab'c")
        assert forest == words("ab", "c")

    def test_precedence(self):
        assert Parser([Letter(), Letters()]).parse("abc") == words("a", "b", "c")
        assert Parser([Letters(), Letter()]).parse("abc") == words("abc")

    def test_unmatched_branch_keeps_siblings(self):
        forest = Parser([Letter(), Paren()]).parse("ab1cd")
        assert forest == words("a", "b")
        [error] = forest.unmatched
        assert (error.start, error.end) == (2, 5)

    def test_unmatched_branch_keeps_ancestors(self):
        forest = Parser([Letter(), Paren()]).parse("(a1b)c")
        assert forest == [Group(items=words("a")), Word("c")]
        [error] = forest.unmatched
        assert (error.start, error.end) == (2, 4)

    def test_strict(self):
        parser = Parser([Letter(), Paren()], strict=True)
        assert parser.strict
        with pytest.raises(NoRuleMatched) as e:
            parser.parse("(a1b)c")
        assert (e.value.start, e.value.end) == (2, 4)

    def test_empty_match(self):
        with pytest.raises(RuleError, match="empty match"):
            Parser([Empty(), Letter()]).parse("abc")

    def test_broken_rule(self):
        with pytest.raises(RuleError, match="no group 'content'"):
            Parser([Letter(), Broken()]).parse("a!")

    def test_gate(self):
        class Never(Letters):
            def gate(self, previous: str | None, context: ParseContext) -> bool:
                return False

        assert Parser([Never(), Letter()]).parse("ab") == words("a", "b")

    def test_gate_sees_previous_match(self):
        recorder = Recorder()
        Parser([recorder, Paren()]).parse("a(bc)d")
        assert recorder.calls == [
            (None, 0),
            ("a", 1),
            ("(bc)", 2),
            ("b", 3),
            ("c", 5),
        ]

    def test_rules_are_copied(self):
        rules = [Letter()]
        parser = Parser(rules)
        rules.append(Paren())
        assert len(parser.rules) == 1

    def test_reusable(self):
        parser = Parser(default_rules())
        assert parser.parse("> a") == parser.parse("> a")
        assert parser.parse("x") == parser.parse("x")

    def test_logging(self, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.DEBUG, logger="chatmark.internal"):
            logger = logging.getLogger("chatmark.internal")
            logger.propagate = True
            try:
                Parser([Letter()]).parse("a1")
            finally:
                logger.propagate = False

        messages = [record.getMessage() for record in caplog.records]
        assert "Letter matched 'a' at 0:1" in messages
        assert any("dropped unmatched text" in m for m in messages)


class TestForest:
    def test_list_like(self):
        forest = Parser([Letter()]).parse("ab")
        assert len(forest) == 2
        assert forest[0] == Word("a")
        assert forest[:1] == [Word("a")]
        assert forest.source == "ab"

    def test_equality(self):
        a = Parser([Letter()]).parse("ab")
        b = Forest("other", words("a", "b"))
        assert a == b
        assert a != Forest("ab")
        assert a != "ab"

    def test_dump(self):
        forest = Parser([Letter(), Paren()]).parse("(a)b")
        assert forest.dump() == "(Group\n  (Word 'a'))\n(Word 'b')"


def _check_spans(nodes: _t.Sequence[Node], start: int, end: int):
    prev_end = start
    for node in nodes:
        assert prev_end <= node.start < node.end <= end
        prev_end = node.end
        if children := node.children():
            _check_children(node, children)


def _check_children(parent: Node, children: _t.Sequence[Node]):
    assert parent.start < children[0].start
    # Quotes have no closing delimiter.
    if not isinstance(parent, (BlockQuote, SingleBlockQuote)):
        assert children[-1].end < parent.end
    _check_spans(children, parent.start, parent.end)


@pytest.mark.parametrize(
    "text",
    [
        "**bar _foo_**",
        "plain text, with punctuation!",
        "***a* b**",
        ">>> **a** \\*b\\*",
        "> **a**\n> b\n",
        "a\n\nb\n\n\nc",
        "__u ~~s ||p *i* p|| s~~ u__",
        "> quote **bold**\n> more\nafter",
        ">>> rest\nof _the_ message",
        "`code` and ```py\nblock```",
        "<@1> <#2> <@&3> <:e:4> <a:f:5>",
        "\\*not italic*",
        "unterminated **bold",
        "mixed üñí**cödé**",
    ],
)
def test_span_totality(text: str):
    forest = parse(text)
    assert forest.is_complete
    _check_spans(list(forest), 0, len(text))
    assert forest[0].start == 0
    assert forest[-1].end == len(text)
