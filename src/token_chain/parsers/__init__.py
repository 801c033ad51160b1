"""Parsers for compiled stylesheets and external token exports."""

from token_chain.parsers.export_parser import ExportParser
from token_chain.parsers.stylesheet_parser import (
    StylesheetParser,
    extract_references,
    extract_tokens,
    find_stylesheet,
)

__all__ = [
    "ExportParser",
    "StylesheetParser",
    "extract_references",
    "extract_tokens",
    "find_stylesheet",
]
