"""Command-line interface module for XML Pretty Formatter.

This module provides the ``xml-pretty-format`` tool for formatting XML files
in place or to stdout and for checking that files are already formatted.
"""

from .main import main

__all__ = ["main"]
