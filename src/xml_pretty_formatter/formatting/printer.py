"""Pretty-printing of parsed XML trees.

The printer walks the tree depth-first and emits each element on its own
line, indented one unit per nesting level. Text content is emitted verbatim
on the same line as its tags; elements with neither content nor children are
emitted self-closing.
"""

from typing import Dict, List, Optional

from xml_pretty_formatter.formatting.linebreaks import LF
from xml_pretty_formatter.shared import ResourceExhaustionError, get_logger
from xml_pretty_formatter.shared.config import DEFAULT_MAX_DEPTH
from xml_pretty_formatter.tree.nodes import DeclarationNode, ElementNode, XmlNode

DEFAULT_INDENT_UNIT = "\t"


def format_attributes(attributes: Dict[str, str]) -> str:
    """Render attributes in insertion order, each with one leading space.

    Values are emitted as-is. A value containing ``"`` (which can only come
    from a single-quoted source attribute) keeps single quotes.
    """
    parts = []
    for name, value in attributes.items():
        if '"' in value:
            if "'" in value:
                value = value.replace('"', "&quot;")
            else:
                parts.append(f" {name}='{value}'")
                continue
        parts.append(f' {name}="{value}"')
    return "".join(parts)


class XMLPrettyPrinter:
    """Renders a document tree with a fixed line break and indent unit.

    One instance can render any number of trees; ``elements_rendered`` and
    ``max_depth_reached`` describe the most recent ``render`` call.
    """

    def __init__(
        self,
        line_break: str = LF,
        indent_unit: str = DEFAULT_INDENT_UNIT,
        max_depth: int = DEFAULT_MAX_DEPTH,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize the printer.

        Args:
            line_break: String inserted for every line break
            indent_unit: String repeated once per nesting level
            max_depth: Deepest nesting level the printer will descend into
            correlation_id: Optional correlation ID for request tracking
        """
        if max_depth <= 0:
            raise ValueError("max_depth must be > 0")
        self.line_break = line_break
        self.indent_unit = indent_unit
        self.max_depth = max_depth
        self.logger = get_logger(__name__, correlation_id, "xml_pretty_printer")
        self.elements_rendered = 0
        self.max_depth_reached = 0

    def render(self, node: XmlNode) -> str:
        """Render a parsed document.

        Args:
            node: Root element or declaration node

        Returns:
            Formatted XML text without a trailing line break

        Raises:
            ResourceExhaustionError: If the tree is nested too deeply to render
        """
        self.elements_rendered = 0
        self.max_depth_reached = 0

        try:
            if isinstance(node, DeclarationNode):
                output = self._render_declaration(node)
            elif isinstance(node, ElementNode):
                output = self._render_element(node, 0)
            else:
                raise TypeError(
                    f"Cannot render {type(node).__name__}; "
                    "expected ElementNode or DeclarationNode"
                )
        except RecursionError as e:
            raise ResourceExhaustionError(
                "Document is nested too deeply to format"
            ) from e

        self.logger.debug(
            "Rendering completed",
            extra={
                "elements_rendered": self.elements_rendered,
                "max_depth_reached": self.max_depth_reached,
                "output_length": len(output),
            }
        )
        return output

    def _line_break_with_indent(self, depth: int) -> str:
        return self.line_break + self.indent_unit * depth

    def _render_declaration(self, node: DeclarationNode) -> str:
        prolog = f"<?xml{format_attributes(node.attributes)}?>"
        return prolog + self._line_break_with_indent(0) + self._render_element(node.root, 0)

    def _render_element(self, node: ElementNode, depth: int) -> str:
        if depth >= self.max_depth:
            raise ResourceExhaustionError(
                f"Document nesting exceeds the maximum depth of {self.max_depth}"
            )
        self.elements_rendered += 1
        self.max_depth_reached = max(self.max_depth_reached, depth + 1)

        opening = f"<{node.name}{format_attributes(node.attributes)}"

        if node.is_self_closing:
            return opening + " />"

        if node.has_children:
            separator = self._line_break_with_indent(depth + 1)
            rendered: List[str] = []
            for child in node.children:
                rendered.append(self._render_element(child, depth + 1))
            return (
                f"{opening}>{separator}{separator.join(rendered)}"
                f"{self._line_break_with_indent(depth)}</{node.name}>"
            )

        return f"{opening}>{node.content}</{node.name}>"


def render(
    node: XmlNode,
    line_break: str = LF,
    indent_unit: str = DEFAULT_INDENT_UNIT,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> str:
    """Render a parsed document with the given line break and indent unit.

    Examples:
        >>> from xml_pretty_formatter.tree import ElementNode
        >>> tree = ElementNode("a", children=[ElementNode("b", content="x")])
        >>> render(tree, "\\n", "  ")
        '<a>\\n  <b>x</b>\\n</a>'
    """
    return XMLPrettyPrinter(line_break, indent_unit, max_depth).render(node)
