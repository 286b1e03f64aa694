"""Tokenization engine for XML formatting.

This module provides a strict tokenizer that converts raw XML text into
positioned tokens, reporting the first malformation with its line and column.

Key Components:
    XMLTokenizer: Scanner converting text into tokens
    Token: Single XML token with position and attributes
    TokenType: Enumeration of supported token types
    TokenPosition: 1-based line/column plus 0-based offset
    TokenizationResult: Token list with statistics
"""

from .tokenizer import (
    Token,
    TokenizationResult,
    TokenPosition,
    TokenType,
    XMLTokenizer,
)

__all__ = [
    "Token",
    "TokenPosition",
    "TokenType",
    "TokenizationResult",
    "XMLTokenizer",
]
