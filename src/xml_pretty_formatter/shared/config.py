"""Configuration classes for XML formatting.

This module provides configuration objects for the parser, the pretty-printer
and the editor-facing formatting options, enabling control over indentation
style and resource limits.
"""

import json
import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Union

DEFAULT_TAB_SIZE = 4
# Rendering uses one stack frame per nesting level; keep well under
# sys.getrecursionlimit() (1000 by default)
DEFAULT_MAX_DEPTH = 512


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


def _coerce_tab_size(value: Any) -> int:
    """Return a usable tab width, falling back to the default for bad input."""
    # bool is an int subclass but never a meaningful width
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_TAB_SIZE
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return DEFAULT_TAB_SIZE
    width = int(value)
    if width < 1:
        return DEFAULT_TAB_SIZE
    return width


@dataclass
class FormattingOptions:
    """Indentation preferences supplied by the editor surface.

    Malformed values never raise: they are coerced to the defaults
    (tabs, width 4) so that formatting can always proceed.
    """

    insert_spaces: bool = False
    tab_size: int = DEFAULT_TAB_SIZE

    def __post_init__(self) -> None:
        """Coerce malformed values to defaults."""
        self.insert_spaces = bool(self.insert_spaces)
        self.tab_size = _coerce_tab_size(self.tab_size)

    @property
    def indent_unit(self) -> str:
        """String repeated once per nesting level."""
        if self.insert_spaces:
            return " " * self.tab_size
        return "\t"

    @classmethod
    def normalize(
        cls, raw: Union[None, "FormattingOptions", Mapping[str, Any]]
    ) -> "FormattingOptions":
        """Build options from whatever the caller handed over.

        Accepts ``None``, an existing instance, or a mapping using either the
        editor's camelCase keys (``insertSpaces``, ``tabSize``) or snake_case.
        A mapping without an ``insertSpaces`` entry resets both fields.

        Args:
            raw: Options as received from the caller

        Returns:
            A valid FormattingOptions instance
        """
        if raw is None:
            return cls()
        if isinstance(raw, cls):
            return cls(insert_spaces=raw.insert_spaces, tab_size=raw.tab_size)
        if not isinstance(raw, Mapping):
            return cls()

        insert_spaces = raw.get("insertSpaces", raw.get("insert_spaces"))
        if insert_spaces is None:
            return cls()

        tab_size = raw.get("tabSize", raw.get("tab_size", DEFAULT_TAB_SIZE))
        return cls(insert_spaces=insert_spaces, tab_size=tab_size)

    def to_dict(self) -> Dict[str, Any]:
        """Convert options to the editor's camelCase dictionary form."""
        return {"insertSpaces": self.insert_spaces, "tabSize": self.tab_size}


@dataclass
class ParserConfig:
    """Configuration for tokenization and tree building."""

    max_depth: int = DEFAULT_MAX_DEPTH
    allow_doctype: bool = True

    def __post_init__(self) -> None:
        """Validate parser configuration."""
        if self.max_depth <= 0:
            raise ValueError("max_depth must be > 0")


@dataclass(frozen=True)
class FormatterConfig:
    """Configuration for a complete format request.

    Immutable so a single instance can be shared by concurrent requests.
    """

    parser: ParserConfig = field(default_factory=ParserConfig)
    options: FormattingOptions = field(default_factory=FormattingOptions)
    max_render_depth: int = DEFAULT_MAX_DEPTH
    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete formatter configuration."""
        try:
            self.parser.__post_init__()
            if self.max_render_depth <= 0:
                raise ValueError("max_render_depth must be > 0")
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        if self.max_render_depth < self.parser.max_depth:
            raise ConfigValidationError(
                f"Render depth limit ({self.max_render_depth}) is below "
                f"parser depth limit ({self.parser.max_depth})",
                field_name="max_render_depth",
                suggestions=[
                    "Increase max_render_depth",
                    "Reduce parser.max_depth",
                ],
            )

    def override(self, **kwargs: Any) -> "FormatterConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Field overrides; ``parser__max_depth`` style keys reach
                into the nested parser or options configuration

        Returns:
            New FormatterConfig instance with overrides applied

        Example:
            >>> config = FormatterConfig()
            >>> new_config = config.override(
            ...     options__insert_spaces=True,
            ...     options__tab_size=2
            ... )
        """
        nested: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                nested.setdefault(component, {})[field_name] = value
            else:
                top_level[key] = value

        unknown = set(nested) - {"parser", "options"}
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration component(s): {', '.join(sorted(unknown))}",
                suggestions=["Use parser__<field> or options__<field>"],
            )

        try:
            if "parser" in nested:
                top_level["parser"] = replace(self.parser, **nested["parser"])
            if "options" in nested:
                top_level["options"] = replace(self.options, **nested["options"])
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

        return replace(self, **top_level)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {
            "parser": {
                "max_depth": self.parser.max_depth,
                "allow_doctype": self.parser.allow_doctype,
            },
            "options": self.options.to_dict(),
            "max_render_depth": self.max_render_depth,
            "name": self.name,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FormatterConfig":
        """Create configuration from dictionary.

        Unknown top-level keys are ignored; formatting options go through
        ``FormattingOptions.normalize`` and are never rejected.
        """
        try:
            parser = ParserConfig(**dict(data.get("parser", {})))
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(
                f"Invalid parser configuration: {e}", field_name="parser"
            ) from e

        return cls(
            parser=parser,
            options=FormattingOptions.normalize(data.get("options")),
            max_render_depth=data.get("max_render_depth", DEFAULT_MAX_DEPTH),
            name=data.get("name"),
        )

    @classmethod
    def from_json(cls, json_str: str) -> "FormatterConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid JSON configuration: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def default(cls) -> "FormatterConfig":
        """Tabs, default limits."""
        return cls(name="default")

    @classmethod
    def spaces(cls, width: int = DEFAULT_TAB_SIZE) -> "FormatterConfig":
        """Space indentation of the given width."""
        return cls(
            options=FormattingOptions(insert_spaces=True, tab_size=width),
            name=f"spaces_{_coerce_tab_size(width)}",
        )
