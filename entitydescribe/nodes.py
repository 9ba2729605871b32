"""
Format-agnostic description tree.

DescriptionBuilder produces one tree per prefix; the XML and HTML
serializers both walk that same tree, so the two documents can only
differ in presentation.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union


@dataclass(frozen=True)
class TextNode:
    name: str
    value: str


@dataclass(frozen=True)
class LinkNode:
    """A canonical URL path plus the output formats it can be fetched in."""

    name: str
    path: str
    formats: tuple = ()


@dataclass(frozen=True)
class ListNode:
    name: str
    item_name: str
    items: tuple = ()


@dataclass
class ElementNode:
    """
    Named group of child nodes.

    A transparent element only groups its children for presentation:
    the XML serializer writes the children in place of the element.
    """

    name: str
    children: list = field(default_factory=list)
    transparent: bool = False
    attributes: Dict[str, str] = field(default_factory=dict)

    def add(self, node: "Node") -> "ElementNode":
        self.children.append(node)
        return self

    def find(self, name: str) -> Optional["Node"]:
        for child in self.children:
            if child.name == name:
                return child
        return None

    def text(self, name: str) -> Optional[str]:
        node = self.find(name)
        return node.value if isinstance(node, TextNode) else None


Node = Union[TextNode, LinkNode, ListNode, ElementNode]
