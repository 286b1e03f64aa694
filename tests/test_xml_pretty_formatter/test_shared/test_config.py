"""Tests for formatter configuration and option normalization."""

import json

import pytest

from xml_pretty_formatter.shared.config import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_TAB_SIZE,
    ConfigValidationError,
    FormatterConfig,
    FormattingOptions,
    ParserConfig,
)


class TestFormattingOptions:
    """Test FormattingOptions defaults and silent coercion."""

    def test_defaults(self) -> None:
        """Default options indent with a single tab."""
        options = FormattingOptions()
        assert options.insert_spaces is False
        assert options.tab_size == DEFAULT_TAB_SIZE
        assert options.indent_unit == "\t"

    def test_space_indent_unit(self) -> None:
        """Space indentation repeats a space tab_size times."""
        options = FormattingOptions(insert_spaces=True, tab_size=2)
        assert options.indent_unit == "  "

    def test_tabs_ignore_tab_size(self) -> None:
        """Tab indentation is one tab regardless of width."""
        assert FormattingOptions(insert_spaces=False, tab_size=8).indent_unit == "\t"

    @pytest.mark.parametrize("bad_size", [
        0, -3, float("nan"), float("inf"), "4", None, True, [2],
    ])
    def test_malformed_tab_size_falls_back_to_default(self, bad_size) -> None:
        """Malformed widths are coerced to the default instead of raising."""
        options = FormattingOptions(insert_spaces=True, tab_size=bad_size)
        assert options.tab_size == DEFAULT_TAB_SIZE
        assert options.indent_unit == " " * DEFAULT_TAB_SIZE

    def test_float_tab_size_is_truncated(self) -> None:
        """Fractional widths are truncated to an integer."""
        assert FormattingOptions(insert_spaces=True, tab_size=3.7).tab_size == 3

    def test_normalize_none(self) -> None:
        """Missing options produce defaults."""
        assert FormattingOptions.normalize(None) == FormattingOptions()

    def test_normalize_camel_case_mapping(self) -> None:
        """Editor-style camelCase keys are accepted."""
        options = FormattingOptions.normalize({"insertSpaces": True, "tabSize": 2})
        assert options.insert_spaces is True
        assert options.tab_size == 2

    def test_normalize_snake_case_mapping(self) -> None:
        """snake_case keys are accepted too."""
        options = FormattingOptions.normalize({"insert_spaces": True, "tab_size": 3})
        assert options.indent_unit == "   "

    def test_normalize_mapping_without_insert_spaces(self) -> None:
        """A mapping without insertSpaces is treated as absent."""
        options = FormattingOptions.normalize({"tabSize": 2})
        assert options == FormattingOptions()

    def test_normalize_non_numeric_tab_size(self) -> None:
        """Non-numeric tabSize keeps insertSpaces but resets the width."""
        options = FormattingOptions.normalize({"insertSpaces": True, "tabSize": "wide"})
        assert options.insert_spaces is True
        assert options.tab_size == DEFAULT_TAB_SIZE

    def test_normalize_garbage(self) -> None:
        """Values that are not mappings produce defaults."""
        assert FormattingOptions.normalize("spaces please") == FormattingOptions()

    def test_normalize_copies_instance(self) -> None:
        """Normalizing an instance returns an equal but separate object."""
        original = FormattingOptions(insert_spaces=True, tab_size=2)
        normalized = FormattingOptions.normalize(original)
        assert normalized == original
        assert normalized is not original

    def test_to_dict_uses_camel_case(self) -> None:
        """Options serialize back to the editor's key names."""
        options = FormattingOptions(insert_spaces=True, tab_size=2)
        assert options.to_dict() == {"insertSpaces": True, "tabSize": 2}


class TestParserConfig:
    """Test ParserConfig validation."""

    def test_defaults(self) -> None:
        """Default parser limits."""
        config = ParserConfig()
        assert config.max_depth == DEFAULT_MAX_DEPTH
        assert config.allow_doctype is True

    def test_invalid_max_depth(self) -> None:
        """A non-positive depth limit is rejected."""
        with pytest.raises(ValueError, match="max_depth must be > 0"):
            ParserConfig(max_depth=0)


class TestFormatterConfig:
    """Test FormatterConfig presets, overrides and serialization."""

    def test_default_preset(self) -> None:
        """The default preset uses tabs."""
        config = FormatterConfig.default()
        assert config.name == "default"
        assert config.options.indent_unit == "\t"

    def test_spaces_preset(self) -> None:
        """The spaces preset uses the requested width."""
        config = FormatterConfig.spaces(2)
        assert config.name == "spaces_2"
        assert config.options.indent_unit == "  "

    def test_config_is_immutable(self) -> None:
        """FormatterConfig cannot be mutated after creation."""
        config = FormatterConfig()
        with pytest.raises(AttributeError):
            config.name = "changed"

    def test_render_depth_below_parser_depth_rejected(self) -> None:
        """The renderer must be able to handle anything the parser accepts."""
        with pytest.raises(ConfigValidationError) as exc_info:
            FormatterConfig(parser=ParserConfig(max_depth=100), max_render_depth=50)
        assert exc_info.value.field_name == "max_render_depth"
        assert exc_info.value.suggestions

    def test_non_positive_render_depth_rejected(self) -> None:
        """A non-positive render depth limit is rejected."""
        with pytest.raises(ConfigValidationError, match="max_render_depth must be > 0"):
            FormatterConfig(max_render_depth=0)

    def test_override_nested_fields(self) -> None:
        """Double-underscore keys reach into nested configuration."""
        config = FormatterConfig().override(
            options__insert_spaces=True,
            options__tab_size=2,
            parser__max_depth=64,
            max_render_depth=64,
        )
        assert config.options.indent_unit == "  "
        assert config.parser.max_depth == 64
        assert config.max_render_depth == 64

    def test_override_leaves_original_untouched(self) -> None:
        """Overrides produce a new instance."""
        original = FormatterConfig()
        original.override(options__insert_spaces=True)
        assert original.options.insert_spaces is False

    def test_override_unknown_component(self) -> None:
        """Unknown nested components are reported."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration component"):
            FormatterConfig().override(printer__width=80)

    def test_override_unknown_field(self) -> None:
        """Unknown nested fields are reported as validation errors."""
        with pytest.raises(ConfigValidationError):
            FormatterConfig().override(parser__strictness=3)

    def test_override_invalid_value(self) -> None:
        """Invalid nested values are reported as validation errors."""
        with pytest.raises(ConfigValidationError):
            FormatterConfig().override(parser__max_depth=-1)

    def test_json_round_trip(self) -> None:
        """Configuration survives JSON serialization."""
        config = FormatterConfig.spaces(2).override(parser__allow_doctype=False)
        restored = FormatterConfig.from_json(config.to_json())
        assert restored == config

    def test_to_dict_structure(self) -> None:
        """Dictionary form uses nested sections."""
        data = FormatterConfig.default().to_dict()
        assert data["parser"] == {"max_depth": DEFAULT_MAX_DEPTH, "allow_doctype": True}
        assert data["options"] == {"insertSpaces": False, "tabSize": DEFAULT_TAB_SIZE}
        assert data["name"] == "default"
        json.dumps(data)

    def test_from_dict_normalizes_options(self) -> None:
        """Malformed options in a dictionary are coerced, not rejected."""
        config = FormatterConfig.from_dict(
            {"options": {"insertSpaces": True, "tabSize": float("nan")}}
        )
        assert config.options.tab_size == DEFAULT_TAB_SIZE

    def test_from_dict_invalid_parser_section(self) -> None:
        """Unknown parser keys raise a validation error naming the section."""
        with pytest.raises(ConfigValidationError, match="Invalid parser configuration") as exc_info:
            FormatterConfig.from_dict({"parser": {"recover": True}})
        assert exc_info.value.field_name == "parser"

    def test_from_json_invalid(self) -> None:
        """Invalid JSON is reported as a validation error."""
        with pytest.raises(ConfigValidationError, match="Invalid JSON"):
            FormatterConfig.from_json("{not json")

    def test_from_json_non_object(self) -> None:
        """JSON that is not an object is rejected."""
        with pytest.raises(ConfigValidationError, match="must be an object"):
            FormatterConfig.from_json("[1, 2]")
