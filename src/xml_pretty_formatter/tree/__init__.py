"""Document tree for XML formatting.

This module provides the node types of a parsed document and the builder that
assembles them from a token stream.

Key Components:
    ElementNode: XML element with ordered attributes, content or children
    DeclarationNode: ``<?xml ...?>`` prolog wrapping the root element
    XMLTreeBuilder: Stack-based construction from tokens
"""

from .builder import XMLTreeBuilder
from .nodes import (
    DeclarationNode,
    ElementNode,
    XmlNode,
    root_element,
    structurally_equal,
)

__all__ = [
    "DeclarationNode",
    "ElementNode",
    "XMLTreeBuilder",
    "XmlNode",
    "root_element",
    "structurally_equal",
]
