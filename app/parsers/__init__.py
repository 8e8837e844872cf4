"""
app/parsers package marker.
"""

from app.parsers.row_parser import MissingHeaderError, ParsedRow, ParsedTable, RowParser

__all__ = [
    "MissingHeaderError",
    "ParsedRow",
    "ParsedTable",
    "RowParser",
]
