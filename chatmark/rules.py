# Chatmark project, MIT license.
#
# You're free to copy this file to your project and edit it for your needs,
# just keep this copyright line please :3

"""
Rules for chat-flavored markdown.

The dialect is close to what chat applications accept in messages: inline
styles, spoilers, code, quotes, mentions and custom emoji. It is not
CommonMark; in particular, there are no headings, lists or links.

Order of rules matters: the parser commits to the first rule that matches,
so :func:`default_rules` lists specific constructs before plain text.

>>> [rule.name for rule in default_rules(["bold", "text"])]
['Bold', 'Text']

"""

from __future__ import annotations

import re

import chatmark.errors
import chatmark.node
import chatmark.parse_spec
import chatmark.rule
from chatmark import _typing as _t

__all__ = [
    "RULES",
    "BlockQuote",
    "Bold",
    "ChannelMention",
    "Code",
    "Emoji",
    "Escape",
    "InlineCode",
    "Italic",
    "Newline",
    "RoleMention",
    "Spoiler",
    "Strikethrough",
    "Text",
    "Underline",
    "UserMention",
    "default_rules",
    "get_rule",
]


class Escape(chatmark.rule.RegexRule):
    """
    A backslash followed by a punctuation character produces that character
    as plain text.

    """

    pattern = re.compile(r"\\(?P<char>[^0-9A-Za-z\s])")

    def build(
        self, capture: chatmark.rule.Capture, context: chatmark.rule.ParseContext
    ) -> chatmark.parse_spec.ParseSpec:
        return chatmark.parse_spec.ParseSpec.terminal(
            chatmark.node.Text(capture.text("char")), *capture.span("char")
        )


class Newline(chatmark.rule.RegexRule):
    """
    A line break. Blank lines collapse into a single break.

    """

    pattern = re.compile(r"(?:\n[ ]*)*\n")

    def build(
        self, capture: chatmark.rule.Capture, context: chatmark.rule.ParseContext
    ) -> chatmark.parse_spec.ParseSpec:
        return chatmark.parse_spec.ParseSpec.terminal(
            chatmark.node.Text("\n"), *capture.span()
        )


class Bold(chatmark.rule.RegexRule):
    pattern = re.compile(r"\*\*(?P<content>[\s\S]+?)\*\*(?!\*)")

    def build(
        self, capture: chatmark.rule.Capture, context: chatmark.rule.ParseContext
    ) -> chatmark.parse_spec.ParseSpec:
        return chatmark.parse_spec.ParseSpec.nonterminal(
            chatmark.node.Bold(), *capture.span("content")
        )


class Underline(chatmark.rule.RegexRule):
    pattern = re.compile(r"__(?P<content>[\s\S]+?)__(?!_)")

    def build(
        self, capture: chatmark.rule.Capture, context: chatmark.rule.ParseContext
    ) -> chatmark.parse_spec.ParseSpec:
        return chatmark.parse_spec.ParseSpec.nonterminal(
            chatmark.node.Underline(), *capture.span("content")
        )


class Italic(chatmark.rule.RegexRule):
    """
    Italic text, either ``_underscored_`` or ``*starred*``.

    """

    pattern = re.compile(
        r"""
        \b_                             # - Underscore form.
        (?P<underscore>
          (?:__|\\[\s\S]|[^\\_])+?      #   Double underscores and escapes don't
        )                               #   close the italics.
        _\b
        |
        \*(?=\S)                        # - Star form, must be followed by a non-space.
        (?P<star>
          (?:
              \*\*                      #   Bold inside italics doesn't close it.
            | \s+(?:[^*\s]|\*\*)        #   Whitespace must be followed by content.
            | [^\s*]
          )+?
        )
        \*(?!\*)
        """,
        re.VERBOSE,
    )

    def build(
        self, capture: chatmark.rule.Capture, context: chatmark.rule.ParseContext
    ) -> chatmark.parse_spec.ParseSpec:
        group = "underscore" if capture.has("underscore") else "star"
        return chatmark.parse_spec.ParseSpec.nonterminal(
            chatmark.node.Italic(), *capture.span(group)
        )


class Strikethrough(chatmark.rule.RegexRule):
    pattern = re.compile(r"~~(?P<content>[\s\S]+?)~~(?!~)")

    def build(
        self, capture: chatmark.rule.Capture, context: chatmark.rule.ParseContext
    ) -> chatmark.parse_spec.ParseSpec:
        return chatmark.parse_spec.ParseSpec.nonterminal(
            chatmark.node.Strikethrough(), *capture.span("content")
        )


class Spoiler(chatmark.rule.RegexRule):
    pattern = re.compile(r"\|\|(?P<content>[\s\S]+?)\|\|")

    def build(
        self, capture: chatmark.rule.Capture, context: chatmark.rule.ParseContext
    ) -> chatmark.parse_spec.ParseSpec:
        return chatmark.parse_spec.ParseSpec.nonterminal(
            chatmark.node.Spoiler(), *capture.span("content")
        )


class Code(chatmark.rule.RegexRule):
    """
    Fenced code block, with an optional language on the first line.

    """

    pattern = re.compile(
        r"""
        ```
        (?P<body>
          (?:(?P<language>[A-z0-9-]+?)\n+)?   # - Language, if followed by a newline.
          \n*
          (?P<text>[\s\S]+?)                  # - Code, without surrounding newlines.
          \n*
        )
        ```
        """,
        re.VERBOSE,
    )

    def build(
        self, capture: chatmark.rule.Capture, context: chatmark.rule.ParseContext
    ) -> chatmark.parse_spec.ParseSpec:
        language = capture.text("language") if capture.has("language") else ""
        return chatmark.parse_spec.ParseSpec.terminal(
            chatmark.node.Code(language, capture.text("text")), *capture.span("body")
        )


class InlineCode(chatmark.rule.RegexRule):
    pattern = re.compile(
        r"""
        (?P<fence>`+)
        (?P<body>\s*(?P<text>[\s\S]*?[^`])\s*)
        (?P=fence)(?!`)
        """,
        re.VERBOSE,
    )

    def build(
        self, capture: chatmark.rule.Capture, context: chatmark.rule.ParseContext
    ) -> chatmark.parse_spec.ParseSpec:
        return chatmark.parse_spec.ParseSpec.terminal(
            chatmark.node.InlineCode(capture.text("text")), *capture.span("body")
        )


_QUOTE_END = "quote_end"


class BlockQuote(chatmark.rule.RegexRule):
    """
    Quotes: ``>>> `` quotes the rest of the message, ``> `` quotes
    consecutive lines that start with it.

    A quote can only start at the beginning of a line, and can't start inside
    another quote.

    """

    pattern = re.compile(
        r"""
        [ ]*>>>[ ]+                     # - Multi-line marker.
        (?P<multi>[\s\S]*)              #   Quotes everything up to the end.
        |
        [ ]*>(?!>>)[ ]+                 # - Single-line marker.
        (?P<single>
          [^\n]*
          (?:\n[ ]*>(?!>>)[ ]+[^\n]*)*  #   More lines with the same marker.
          \n?
        )
        """,
        re.VERBOSE,
    )

    def gate(
        self, previous: str | None, context: chatmark.rule.ParseContext
    ) -> bool:
        offset = context.offset
        if offset > 0 and context.source[offset - 1] != "\n":
            # Previous match may end with a newline that is nested
            # in some other node, as in `**a\n**> b`.
            return False
        if previous is None:
            return True
        if not previous.endswith("\n"):
            return False
        return offset >= context.state.get(_QUOTE_END, 0)

    def build(
        self, capture: chatmark.rule.Capture, context: chatmark.rule.ParseContext
    ) -> chatmark.parse_spec.ParseSpec:
        context.state[_QUOTE_END] = context.offset + capture.end
        if capture.has("multi"):
            return chatmark.parse_spec.ParseSpec.nonterminal(
                chatmark.node.BlockQuote(), *capture.span("multi")
            )
        else:
            return chatmark.parse_spec.ParseSpec.nonterminal(
                chatmark.node.SingleBlockQuote(), *capture.span("single")
            )


class Emoji(chatmark.rule.RegexRule):
    pattern = re.compile(r"<(?P<animated>a?):(?P<name>.+?):(?P<id>\d+?)>")

    def build(
        self, capture: chatmark.rule.Capture, context: chatmark.rule.ParseContext
    ) -> chatmark.parse_spec.ParseSpec:
        node = chatmark.node.Emoji(
            capture.text("name"),
            int(capture.text("id")),
            animated=capture.text("animated") == "a",
        )
        start, _ = capture.span("name")
        _, end = capture.span("id")
        return chatmark.parse_spec.ParseSpec.terminal(node, start, end)


class RoleMention(chatmark.rule.RegexRule):
    pattern = re.compile(r"<@&(?P<id>\d+?)>")

    def build(
        self, capture: chatmark.rule.Capture, context: chatmark.rule.ParseContext
    ) -> chatmark.parse_spec.ParseSpec:
        node = chatmark.node.RoleMention(int(capture.text("id")))
        return chatmark.parse_spec.ParseSpec.terminal(node, *capture.span("id"))


class ChannelMention(chatmark.rule.RegexRule):
    pattern = re.compile(r"<\#(?P<id>\d+?)>")

    def build(
        self, capture: chatmark.rule.Capture, context: chatmark.rule.ParseContext
    ) -> chatmark.parse_spec.ParseSpec:
        node = chatmark.node.ChannelMention(int(capture.text("id")))
        return chatmark.parse_spec.ParseSpec.terminal(node, *capture.span("id"))


class UserMention(chatmark.rule.RegexRule):
    pattern = re.compile(r"<@!?(?P<id>\d+?)>")

    def build(
        self, capture: chatmark.rule.Capture, context: chatmark.rule.ParseContext
    ) -> chatmark.parse_spec.ParseSpec:
        node = chatmark.node.UserMention(int(capture.text("id")))
        return chatmark.parse_spec.ParseSpec.terminal(node, *capture.span("id"))


class Text(chatmark.rule.RegexRule):
    """
    Fallback rule: plain text up to the next character that may start
    some other construct.

    """

    pattern = re.compile(
        r"""
        [\s\S]+?
        (?=
            [^0-9A-Za-z\s\u00c0-\uffff]  # - Punctuation may start markup.
          | \n
          | [ ]{2,}\n
          | \w+:\S                       # - Something that looks like a url.
          | $
        )
        """,
        re.VERBOSE,
    )

    def build(
        self, capture: chatmark.rule.Capture, context: chatmark.rule.ParseContext
    ) -> chatmark.parse_spec.ParseSpec:
        return chatmark.parse_spec.ParseSpec.terminal(
            chatmark.node.Text(capture.text()), *capture.span()
        )


RULES: dict[str, type[chatmark.rule.Rule]] = {
    rule.__name__: rule
    for rule in [
        Escape,
        Newline,
        BlockQuote,
        Bold,
        Underline,
        Italic,
        Strikethrough,
        Spoiler,
        Code,
        InlineCode,
        Emoji,
        RoleMention,
        ChannelMention,
        UserMention,
        Text,
    ]
}
"""
All markdown rules, in their default order.

"""


def get_rule(name: str, /) -> type[chatmark.rule.Rule]:
    """
    Find a markdown rule by its name, ignoring case.

    :raises ~chatmark.errors.ConfigError:
        if there's no such rule.

    """

    for rule_name, rule in RULES.items():
        if rule_name.lower() == name.strip().lower():
            return rule
    raise chatmark.errors.ConfigError(
        f"unknown rule {name!r}, expected one of {', '.join(RULES)}"
    )


def default_rules(
    names: _t.Iterable[str] | None = None, /
) -> list[chatmark.rule.Rule]:
    """
    Create a fresh list of markdown rules.

    :param names:
        names of rules to include, in order of priority. By default,
        all rules from :data:`RULES` are included.

    """

    if names is None:
        return [rule() for rule in RULES.values()]
    return [get_rule(name)() for name in names]
