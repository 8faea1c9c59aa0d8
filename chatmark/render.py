# Chatmark project, MIT license.
#
# You're free to copy this file to your project and edit it for your needs,
# just keep this copyright line please :3

"""
Rendering nodes back to markdown.

Each node kind is rendered by rendering its children and wrapping them in that
kind's delimiters. Delimiters are normalized, so the output is not always
identical to the parsed text:

>>> from chatmark.parser import parse
>>> as_markdown(parse("*foo* and **bar**"))
'_foo_ and **bar**'

Punctuation in plain text is escaped, so it can't turn into markup when
the result is parsed again:

>>> as_markdown(parse("\\\\*foo*"))
'\\\\*foo\\\\*'

Re-parsing the output gives an equivalent tree, that is, a tree that
only differs in how plain text is split between adjacent
:class:`~chatmark.node.Text` nodes.

"""

from __future__ import annotations

import re

import chatmark.node
from chatmark import _typing as _t

__all__ = [
    "MdRenderer",
    "as_markdown",
]

_PUNCTUATION_RE = re.compile(r"([^0-9A-Za-z\s\u00c0-\uffff])")
_BACKTICKS_RE = re.compile(r"`+")
_WORD_RE = re.compile(r"\w")
# Continuation markers of a quote are plain text, and get escaped with it.
_QUOTE_MARKER_RE = re.compile(r"(\n[ ]*)\\>")


@_t.final
class MdRenderer:
    """
    Renders node trees as markdown text.

    """

    def render(self, node: chatmark.node.Node, /) -> str:
        """
        Render a single node.

        """

        return getattr(self, f"_render_{node.__class__.__name__}")(node)

    def render_all(self, nodes: _t.Iterable[chatmark.node.Node], /) -> str:
        """
        Render a sequence of nodes and join the results.

        """

        items = list(nodes)
        parts = [self.render(node) for node in items]
        for i, node in enumerate(items[:-1]):
            if isinstance(node, chatmark.node.Italic) and _WORD_RE.match(parts[i + 1]):
                # `_x_y` is not italic, `*x*y` is.
                parts[i] = f"*{self._render_children(node)}*"
        return "".join(parts)

    def _render_children(self, node: chatmark.node.Node, /) -> str:
        return self.render_all(node.children() or [])

    def _render_Text(self, node: chatmark.node.Text, /) -> str:
        return _PUNCTUATION_RE.sub(r"\\\1", node.text)

    def _render_Bold(self, node: chatmark.node.Bold, /) -> str:
        return f"**{self._render_children(node)}**"

    def _render_Italic(self, node: chatmark.node.Italic, /) -> str:
        return f"_{self._render_children(node)}_"

    def _render_Underline(self, node: chatmark.node.Underline, /) -> str:
        return f"__{self._render_children(node)}__"

    def _render_Strikethrough(self, node: chatmark.node.Strikethrough, /) -> str:
        return f"~~{self._render_children(node)}~~"

    def _render_Spoiler(self, node: chatmark.node.Spoiler, /) -> str:
        return f"||{self._render_children(node)}||"

    def _render_InlineCode(self, node: chatmark.node.InlineCode, /) -> str:
        runs = _BACKTICKS_RE.findall(node.text)
        fence = "`" * (max(map(len, runs), default=0) + 1)
        if node.text.startswith("`"):
            return f"{fence} {node.text} {fence}"
        return f"{fence}{node.text}{fence}"

    def _render_Code(self, node: chatmark.node.Code, /) -> str:
        return f"```{node.language}\n{node.text}```"

    def _render_SingleBlockQuote(
        self, node: chatmark.node.SingleBlockQuote, /
    ) -> str:
        # Content keeps markers of continuation lines and the trailing newline.
        return "> " + _QUOTE_MARKER_RE.sub(r"\1>", self._render_children(node))

    def _render_BlockQuote(self, node: chatmark.node.BlockQuote, /) -> str:
        return f">>> {self._render_children(node)}"

    def _render_UserMention(self, node: chatmark.node.UserMention, /) -> str:
        return f"<@{node.id}>"

    def _render_ChannelMention(self, node: chatmark.node.ChannelMention, /) -> str:
        return f"<#{node.id}>"

    def _render_RoleMention(self, node: chatmark.node.RoleMention, /) -> str:
        return f"<@&{node.id}>"

    def _render_Emoji(self, node: chatmark.node.Emoji, /) -> str:
        prefix = "a" if node.animated else ""
        return f"<{prefix}:{node.name}:{node.id}>"


def as_markdown(
    nodes: chatmark.node.Node | _t.Iterable[chatmark.node.Node], /
) -> str:
    """
    Render a node, or a sequence of nodes such as
    a :class:`~chatmark.parser.Forest`, to markdown.

    """

    renderer = MdRenderer()
    if isinstance(nodes, chatmark.node.Node):
        return renderer.render(nodes)
    return renderer.render_all(nodes)
