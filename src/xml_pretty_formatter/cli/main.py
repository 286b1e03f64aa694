"""Main CLI entry point for the xml-pretty-format command-line tool.

Formats XML files in place or to stdout, or checks that they are already
formatted.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from xml_pretty_formatter import __version__
from xml_pretty_formatter.api import XMLFormatter
from xml_pretty_formatter.formatting import LF
from xml_pretty_formatter.shared.config import (
    ConfigError,
    FormatterConfig,
    FormattingOptions,
)
from xml_pretty_formatter.shared.logging import get_logger

XML_SUFFIXES = {".xml", ".xsd", ".xsl", ".xslt", ".svg", ".xhtml"}


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self):
        self.formatter_config = FormatterConfig.default()
        self.recursive = False
        self.encoding = "utf-8"

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        The file may contain ``formatter`` (see ``FormatterConfig.from_dict``),
        ``recursive`` and ``encoding`` entries.
        """
        config = cls()
        if not config_path.exists():
            return config

        try:
            with config_path.open(encoding="utf-8") as f:
                data = json.load(f)
            if "formatter" in data:
                config.formatter_config = FormatterConfig.from_dict(data["formatter"])
            config.recursive = bool(data.get("recursive", config.recursive))
            config.encoding = data.get("encoding", config.encoding)
        except (OSError, ValueError, ConfigError) as e:
            print(f"Warning: Could not load config file: {e}", file=sys.stderr)

        return config


class XMLFileProcessor:
    """Reads, formats and writes XML files for CLI operations."""

    def __init__(self, config: CLIConfig):
        self.config = config
        self.logger = get_logger(__name__, None, "cli_processor")

    def find_xml_files(self, path: Path, recursive: bool = False) -> Iterator[Path]:
        """Yield XML files at ``path``; explicit files are yielded as given."""
        if path.is_file():
            yield path
        elif path.is_dir():
            candidates = path.rglob("*") if recursive else path.glob("*")
            for candidate in sorted(candidates):
                if candidate.is_file() and candidate.suffix.lower() in XML_SUFFIXES:
                    yield candidate

    def read(self, file_path: Path) -> str:
        """Read a file without translating its line endings."""
        with file_path.open(encoding=self.config.encoding, newline="") as f:
            return f.read()

    def write(self, file_path: Path, text: str) -> None:
        """Write a file without translating line endings."""
        with file_path.open("w", encoding=self.config.encoding, newline="") as f:
            f.write(text)

    def process_file(self, file_path: Path) -> Dict[str, Any]:
        """Format a single file and describe the outcome.

        ``formatted`` is the exact file content to write: the formatted
        document followed by one line break of the document's own kind.
        """
        file_logger = self.logger.bind(file=str(file_path))
        try:
            original = self.read(file_path)
        except (OSError, UnicodeDecodeError) as e:
            file_logger.warning("Failed to read file", exc_info=True)
            return {"file": str(file_path), "success": False, "error": f"Cannot read file: {e}"}

        result = XMLFormatter(
            original,
            config=self.config.formatter_config,
            correlation_id=file_path.name,
        ).format()

        if not result.success:
            file_logger.debug("File could not be formatted", extra={"kind": result.error.kind})
            return {
                "file": str(file_path),
                "success": False,
                "error": result.user_message,
            }

        formatted = result.new_text + (result.metrics.line_break or LF)
        file_logger.debug("File formatted", extra={"changed": formatted != original})
        return {
            "file": str(file_path),
            "success": True,
            "original": original,
            "formatted": formatted,
            "changed": formatted != original,
            "processing_time_ms": result.metrics.processing_time_ms,
        }

    def collect(self, paths: List[Path], recursive: bool) -> List[Path]:
        files: List[Path] = []
        for path in paths:
            if not path.exists():
                print(f"File not found: {path}", file=sys.stderr)
                continue
            files.extend(self.find_xml_files(path, recursive))
        return files


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="xml-pretty-format",
        description="Re-indent XML documents using their own line-break convention"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    indent_options = argparse.ArgumentParser(add_help=False)
    indent_group = indent_options.add_mutually_exclusive_group()
    indent_group.add_argument(
        "--spaces", "-s",
        type=int,
        metavar="N",
        help="Indent with N spaces per level"
    )
    indent_group.add_argument(
        "--tabs", "-t",
        action="store_true",
        help="Indent with tabs (default)"
    )
    indent_options.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Recursively process directories"
    )
    indent_options.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )

    # Format command
    format_parser = subparsers.add_parser(
        "format", help="Format XML files", parents=[indent_options]
    )
    format_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files or directories to format"
    )
    output_group = format_parser.add_mutually_exclusive_group()
    output_group.add_argument(
        "--in-place", "-i",
        action="store_true",
        help="Rewrite files in place"
    )
    output_group.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (single input only, default: stdout)"
    )

    # Check command
    check_parser = subparsers.add_parser(
        "check", help="Check that XML files are already formatted", parents=[indent_options]
    )
    check_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files or directories to check"
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def _load_config(args: argparse.Namespace) -> CLIConfig:
    config = CLIConfig()
    if args.config:
        config = CLIConfig.from_file(args.config)

    if args.spaces is not None:
        config.formatter_config = config.formatter_config.override(
            options=FormattingOptions(insert_spaces=True, tab_size=args.spaces)
        )
    elif args.tabs:
        config.formatter_config = config.formatter_config.override(
            options=FormattingOptions(insert_spaces=False)
        )

    if args.recursive:
        config.recursive = True
    return config


def cmd_format(args: argparse.Namespace) -> int:
    """Handle format command."""
    config = _load_config(args)
    processor = XMLFileProcessor(config)
    files = processor.collect(args.paths, config.recursive)

    if not files:
        print("No XML files found", file=sys.stderr)
        return 1
    if args.output and len(files) > 1:
        print("--output requires exactly one input file", file=sys.stderr)
        return 1

    failures = 0
    for file_path in files:
        result = processor.process_file(file_path)
        if not result["success"]:
            failures += 1
            print(f"{file_path}: {result['error']}", file=sys.stderr)
            continue

        if args.in_place:
            if result["changed"]:
                processor.write(file_path, result["formatted"])
                print(f"Formatted: {file_path}", file=sys.stderr)
        elif args.output:
            processor.write(args.output, result["formatted"])
            print(f"Results written to {args.output}", file=sys.stderr)
        else:
            sys.stdout.write(result["formatted"])

    return 0 if failures == 0 else 1


def cmd_check(args: argparse.Namespace) -> int:
    """Handle check command."""
    config = _load_config(args)
    processor = XMLFileProcessor(config)
    files = processor.collect(args.paths, config.recursive)

    if not files:
        print("No XML files found", file=sys.stderr)
        return 1

    problems = 0
    for file_path in files:
        result = processor.process_file(file_path)
        if not result["success"]:
            problems += 1
            print(f"✗ {file_path}: {result['error']}")
        elif result["changed"]:
            problems += 1
            print(f"✗ {file_path}: not formatted")
        else:
            print(f"✓ {file_path}")

    print(f"Checked {len(files)} files, {len(files) - problems} formatted", file=sys.stderr)
    return 0 if problems == 0 else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Set up logging verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    try:
        if args.command == "format":
            return cmd_format(args)
        elif args.command == "check":
            return cmd_check(args)
        else:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
