# Chatmark project, MIT license.
#
# You're free to copy this file to your project and edit it for your needs,
# just keep this copyright line please :3

"""
Node tree produced by the parser.

Every node satisfies the same small capability: it can list its children
and accept a new child. Containers keep children in order, leaves hold inline
data and silently ignore :meth:`~Node.add_child`, so the engine never needs
to check what kind of node it is attaching to.

Nodes compare structurally: two trees are equal when they have the same kinds,
the same data and equal children. Source spans are recorded on every node,
but they don't take part in comparisons.

>>> from chatmark.node import Bold, Text
>>> bold = Bold()
>>> bold.add_child(Text("bar"))
>>> print(bold.dump())
(Bold
  (Text 'bar'))

"""

from __future__ import annotations

import abc
import dataclasses
from dataclasses import dataclass

import chatmark

__all__ = [
    "BlockQuote",
    "Bold",
    "ChannelMention",
    "Code",
    "Container",
    "Emoji",
    "InlineCode",
    "Italic",
    "Leaf",
    "Node",
    "RoleMention",
    "SingleBlockQuote",
    "Spoiler",
    "Strikethrough",
    "Text",
    "Underline",
    "UserMention",
]


@dataclass(**chatmark._with_slots())
class Node(abc.ABC):
    """
    Base class for all nodes of a parse tree.

    """

    start: int = dataclasses.field(default=0, kw_only=True, repr=False, compare=False)
    """
    Offset of the first character of the text this node was parsed from.

    """

    end: int = dataclasses.field(default=0, kw_only=True, repr=False, compare=False)
    """
    Offset past the last character of the text this node was parsed from.

    """

    @abc.abstractmethod
    def children(self) -> list[Node] | None:
        """
        Return children of this node, or :data:`None` if this node can't have them.

        """

    @abc.abstractmethod
    def add_child(self, child: Node, /):
        """
        Append a child to this node. Does nothing for leaf nodes.

        """

    def _dump_params(self) -> str:
        s = self.__class__.__name__.lstrip("_")
        for field in dataclasses.fields(self):
            if field.repr:
                s += f" {getattr(self, field.name)!r}"
        return s

    def dump(self, indent: str = "") -> str:
        """
        Dump a node into a lisp-like text representation.

        """

        return f"{indent}({self._dump_params()})"


@dataclass(**chatmark._with_slots())
class Leaf(Node):
    """
    Base class for nodes that hold inline data and have no children.

    """

    def children(self) -> None:
        return None

    def add_child(self, child: Node, /):
        pass


@dataclass(**chatmark._with_slots())
class Container(Node):
    """
    Base class for nodes whose content is parsed into child nodes.

    """

    items: list[Node] = dataclasses.field(default_factory=list, repr=False)
    """
    Child nodes, in the order they appear in the source.

    """

    def children(self) -> list[Node]:
        return self.items

    def add_child(self, child: Node, /):
        self.items.append(child)

    def dump(self, indent: str = "") -> str:
        s = f"{indent}({self._dump_params()}"
        indent += "  "
        for item in self.items:
            s += "\n"
            s += item.dump(indent)
        s += ")"
        return s


@dataclass(**chatmark._with_slots())
class Text(Leaf):
    """
    A run of plain text.

    """

    text: str


@dataclass(**chatmark._with_slots())
class Bold(Container):
    """
    Bold text, ``**...**``.

    """


@dataclass(**chatmark._with_slots())
class Italic(Container):
    """
    Italic text, ``_..._`` or ``*...*``.

    """


@dataclass(**chatmark._with_slots())
class Underline(Container):
    """
    Underlined text, ``__...__``.

    """


@dataclass(**chatmark._with_slots())
class Strikethrough(Container):
    """
    Crossed out text, ``~~...~~``.

    """


@dataclass(**chatmark._with_slots())
class Spoiler(Container):
    """
    Hidden text, ``||...||``.

    """


@dataclass(**chatmark._with_slots())
class InlineCode(Leaf):
    """
    Inline code span wrapped in backticks.

    """

    text: str


@dataclass(**chatmark._with_slots())
class Code(Leaf):
    """
    Fenced code block.

    """

    language: str
    """
    Syntax indicator as written after the opening fence, may be empty.

    """

    text: str


@dataclass(**chatmark._with_slots())
class SingleBlockQuote(Container):
    """
    Quote made of consecutive lines starting with ``>``.

    """


@dataclass(**chatmark._with_slots())
class BlockQuote(Container):
    """
    Quote that starts with ``>>>`` and extends to the end of the message.

    """


@dataclass(**chatmark._with_slots())
class UserMention(Leaf):
    id: int


@dataclass(**chatmark._with_slots())
class ChannelMention(Leaf):
    id: int


@dataclass(**chatmark._with_slots())
class RoleMention(Leaf):
    id: int


@dataclass(**chatmark._with_slots())
class Emoji(Leaf):
    """
    Custom emoji, ``<:name:id>``, or ``<a:name:id>`` if animated.

    """

    name: str
    id: int
    animated: bool = False

