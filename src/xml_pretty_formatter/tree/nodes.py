"""Document tree nodes produced by the parser and consumed by the printer.

A parsed document is either a bare ``ElementNode`` or a ``DeclarationNode``
wrapping the root element together with the ``<?xml ...?>`` prolog. Parents
own their children outright; there are no back-references.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union


@dataclass
class ElementNode:
    """Represents a single XML element.

    ``content`` and ``children`` are mutually exclusive: mixed content is
    rejected rather than silently losing text. Whitespace-only content is
    normalized to ``None`` so that such an element renders self-closing.
    """

    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    content: Optional[str] = None
    children: List["ElementNode"] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate element values and normalize whitespace-only content."""
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Element name cannot be empty")
        for attr_name, attr_value in self.attributes.items():
            if not isinstance(attr_name, str) or not attr_name:
                raise ValueError("Attribute names must be non-empty strings")
            if not isinstance(attr_value, str):
                raise TypeError(f"Attribute '{attr_name}' value must be a string")
        if self.content is not None and not self.content.strip():
            self.content = None
        if self.content is not None and self.children:
            raise ValueError(
                f"Element <{self.name}> cannot have both text content and children"
            )

    @property
    def has_children(self) -> bool:
        """Check if this element has child elements."""
        return len(self.children) > 0

    @property
    def has_content(self) -> bool:
        """Check if this element carries non-whitespace text."""
        return self.content is not None

    @property
    def is_self_closing(self) -> bool:
        """An element without content and without children renders as ``<name />``."""
        return not self.has_content and not self.has_children

    def add_child(self, child: "ElementNode") -> None:
        """Append a child element."""
        if not isinstance(child, ElementNode):
            raise TypeError("Child must be an ElementNode instance")
        if self.content is not None:
            raise ValueError(
                f"Element <{self.name}> cannot have both text content and children"
            )
        self.children.append(child)

    def iter_elements(self) -> Iterator["ElementNode"]:
        """Iterate over this element and all descendants in document order."""
        stack = [self]
        while stack:
            element = stack.pop()
            yield element
            stack.extend(reversed(element.children))

    def find(self, name: str) -> Optional["ElementNode"]:
        """Find first descendant element with matching name."""
        return next(
            (elem for elem in self.iter_elements() if elem is not self and elem.name == name),
            None,
        )

    def find_all(self, name: str) -> List["ElementNode"]:
        """Find all descendant elements with matching name."""
        return [
            elem for elem in self.iter_elements()
            if elem is not self and elem.name == name
        ]

    @property
    def element_count(self) -> int:
        """Number of elements in this subtree, including this one."""
        return sum(1 for _ in self.iter_elements())

    @property
    def depth(self) -> int:
        """Nesting depth of this subtree; a leaf has depth 1."""
        deepest = 0
        stack = [(self, 1)]
        while stack:
            element, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in element.children)
        return deepest

    def is_structurally_equal(self, other: "ElementNode") -> bool:
        """Compare names, ordered attributes, content and children."""
        pairs = [(self, other)]
        while pairs:
            left, right = pairs.pop()
            if (
                left.name != right.name
                or list(left.attributes.items()) != list(right.attributes.items())
                or left.content != right.content
                or len(left.children) != len(right.children)
            ):
                return False
            pairs.extend(zip(left.children, right.children))
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to dictionary representation."""
        result: Dict[str, Any] = {
            "name": self.name,
            "attributes": dict(self.attributes),
        }
        if self.content is not None:
            result["content"] = self.content
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


@dataclass
class DeclarationNode:
    """XML prolog (``<?xml ...?>``) paired with the document's root element."""

    attributes: Dict[str, str]
    root: ElementNode

    def __post_init__(self) -> None:
        """Validate declaration values."""
        if not isinstance(self.root, ElementNode):
            raise TypeError("Declaration root must be an ElementNode instance")
        for attr_name, attr_value in self.attributes.items():
            if not isinstance(attr_name, str) or not attr_name:
                raise ValueError("Attribute names must be non-empty strings")
            if not isinstance(attr_value, str):
                raise TypeError(f"Attribute '{attr_name}' value must be a string")

    @property
    def version(self) -> Optional[str]:
        """Declared XML version, if any."""
        return self.attributes.get("version")

    @property
    def encoding(self) -> Optional[str]:
        """Declared encoding, if any."""
        return self.attributes.get("encoding")

    def is_structurally_equal(self, other: "DeclarationNode") -> bool:
        """Compare ordered prolog attributes and the root subtree."""
        return (
            list(self.attributes.items()) == list(other.attributes.items())
            and self.root.is_structurally_equal(other.root)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert declaration to dictionary representation."""
        return {
            "declaration": {"attributes": dict(self.attributes)},
            "root": self.root.to_dict(),
        }


XmlNode = Union[DeclarationNode, ElementNode]


def root_element(node: XmlNode) -> ElementNode:
    """Return the root element whether or not a declaration wraps it."""
    if isinstance(node, DeclarationNode):
        return node.root
    return node


def structurally_equal(left: XmlNode, right: XmlNode) -> bool:
    """Compare two parsed documents node by node."""
    if isinstance(left, DeclarationNode) and isinstance(right, DeclarationNode):
        return left.is_structurally_equal(right)
    if isinstance(left, ElementNode) and isinstance(right, ElementNode):
        return left.is_structurally_equal(right)
    return False
