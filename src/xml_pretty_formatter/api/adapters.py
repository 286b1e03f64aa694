"""Integration adapters for exchanging document trees with other XML libraries.

Adapters convert between ``ElementNode`` / ``DeclarationNode`` trees and the
element objects of lxml or the standard library's ElementTree. Conversions go
through serialized text so that entity and CDATA handling stays with the
library that owns it.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Type

from xml_pretty_formatter.api.parser import parse
from xml_pretty_formatter.formatting import render
from xml_pretty_formatter.shared import XMLFormatError, get_logger
from xml_pretty_formatter.tree import DeclarationNode, XmlNode, root_element


class ConversionDirection(Enum):
    """Direction of data conversion."""

    TO_TARGET = auto()      # Node tree to library element
    FROM_TARGET = auto()    # Library element to node tree


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    target_library: str
    description: str
    supported_versions: List[str] = field(default_factory=list)


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    direction: ConversionDirection
    conversion_time_ms: float = 0.0
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


class IntegrationAdapter(ABC):
    """Abstract base class for all integration adapters.

    Conversions never raise; failures are reported through
    ``ConversionResult.errors``.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        """Initialize the integration adapter.

        Args:
            correlation_id: Optional correlation ID for request tracking
        """
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def _element_from_text(self, xml_text: str) -> Any:
        """Parse serialized XML with the target library."""

    @abstractmethod
    def _element_to_text(self, element: Any) -> str:
        """Serialize a target library element, without its tail."""

    def to_target(self, node: XmlNode) -> ConversionResult:
        """Convert a node tree into the target library's root element.

        Prolog attributes of a DeclarationNode are reported in
        ``metadata["declaration"]``.
        """
        start_time = time.time()
        try:
            xml_text = render(root_element(node), "", "")
            element = self._element_from_text(xml_text)
        except Exception as e:
            self._logger.warning(
                "Conversion to target failed",
                extra={"target_library": self.metadata.target_library},
                exc_info=True,
            )
            return self._create_error_result(
                f"Failed to convert to {self.metadata.target_library}: {e}",
                node,
                ConversionDirection.TO_TARGET,
                start_time,
            )

        metadata: Dict[str, Any] = {"root_name": root_element(node).name}
        if isinstance(node, DeclarationNode):
            metadata["declaration"] = dict(node.attributes)
        return ConversionResult(
            success=True,
            converted_data=element,
            original_data=node,
            direction=ConversionDirection.TO_TARGET,
            conversion_time_ms=(time.time() - start_time) * 1000,
            metadata=metadata,
        )

    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert a target library element into a node tree."""
        start_time = time.time()
        if not hasattr(target_data, "tag"):
            return self._create_error_result(
                f"Target data is not a valid {self.metadata.target_library} element",
                target_data,
                ConversionDirection.FROM_TARGET,
                start_time,
            )

        try:
            xml_text = self._element_to_text(target_data)
            node = parse(xml_text, correlation_id=self.correlation_id)
        except XMLFormatError as e:
            return self._create_error_result(
                f"Element cannot be represented: {e}",
                target_data,
                ConversionDirection.FROM_TARGET,
                start_time,
            )
        except Exception as e:
            self._logger.warning(
                "Conversion from target failed",
                extra={"target_library": self.metadata.target_library},
                exc_info=True,
            )
            return self._create_error_result(
                f"Failed to convert from {self.metadata.target_library}: {e}",
                target_data,
                ConversionDirection.FROM_TARGET,
                start_time,
            )

        return ConversionResult(
            success=True,
            converted_data=node,
            original_data=target_data,
            direction=ConversionDirection.FROM_TARGET,
            conversion_time_ms=(time.time() - start_time) * 1000,
            metadata={"xml_length": len(xml_text)},
        )

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        direction: ConversionDirection,
        start_time: float,
    ) -> ConversionResult:
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            direction=direction,
            conversion_time_ms=(time.time() - start_time) * 1000,
            errors=[error_message],
        )


class LxmlAdapter(IntegrationAdapter):
    """Adapter for bidirectional conversion with lxml.etree."""

    @property
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""
        return AdapterMetadata(
            name="lxml",
            target_library="lxml",
            description="Bidirectional conversion between node trees and lxml.etree",
            supported_versions=["4.0+"],
        )

    def is_available(self) -> bool:
        """Check if lxml is available."""
        try:
            import lxml.etree  # noqa: F401
            return True
        except ImportError:
            return False

    def _element_from_text(self, xml_text: str) -> Any:
        import lxml.etree as ET
        return ET.fromstring(xml_text.encode("utf-8"))

    def _element_to_text(self, element: Any) -> str:
        import lxml.etree as ET
        return ET.tostring(element, encoding="unicode", with_tail=False)


class ElementTreeAdapter(IntegrationAdapter):
    """Adapter for bidirectional conversion with xml.etree.ElementTree."""

    @property
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""
        return AdapterMetadata(
            name="elementtree",
            target_library="xml.etree.ElementTree",
            description="Bidirectional conversion between node trees and ElementTree",
        )

    def is_available(self) -> bool:
        """ElementTree ships with the standard library."""
        return True

    def _element_from_text(self, xml_text: str) -> Any:
        import xml.etree.ElementTree as ET
        return ET.fromstring(xml_text)

    def _element_to_text(self, element: Any) -> str:
        import xml.etree.ElementTree as ET
        tail, element.tail = element.tail, None
        try:
            return ET.tostring(element, encoding="unicode")
        finally:
            element.tail = tail


class AdapterRegistry:
    """Registry of adapters by name."""

    def __init__(self) -> None:
        self._adapters: Dict[str, Type[IntegrationAdapter]] = {}

    def register(self, adapter_class: Type[IntegrationAdapter]) -> None:
        """Register an adapter class under its metadata name."""
        name = adapter_class().metadata.name
        self._adapters[name] = adapter_class

    def get_adapter(
        self, name: str, correlation_id: Optional[str] = None
    ) -> Optional[IntegrationAdapter]:
        """Instantiate a registered adapter if its library is available."""
        adapter_class = self._adapters.get(name)
        if adapter_class is None:
            return None
        adapter = adapter_class(correlation_id)
        if not adapter.is_available():
            return None
        return adapter

    def list_available_adapters(self) -> List[AdapterMetadata]:
        """Metadata of every registered adapter whose library is importable."""
        available = []
        for adapter_class in self._adapters.values():
            adapter = adapter_class()
            if adapter.is_available():
                available.append(adapter.metadata)
        return available


_registry = AdapterRegistry()
_registry.register(LxmlAdapter)
_registry.register(ElementTreeAdapter)


def register_adapter(adapter_class: Type[IntegrationAdapter]) -> None:
    """Register an adapter class in the global registry."""
    _registry.register(adapter_class)


def get_adapter(
    name: str, correlation_id: Optional[str] = None
) -> Optional[IntegrationAdapter]:
    """Get an adapter from the global registry, or None if unavailable."""
    return _registry.get_adapter(name, correlation_id)


def list_available_adapters() -> List[AdapterMetadata]:
    """List adapters whose target library is importable."""
    return _registry.list_available_adapters()
