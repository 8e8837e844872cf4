"""
app/parsers/row_parser.py

Splits semicolon-delimited budget text into rows and cells.

The dialect is deliberately minimal: ``"`` toggles a quoted section in which
the delimiter is literal, quote characters themselves are dropped, and there
is no escape for an embedded quote.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

from app.mappers.budget_schema import CSV_DELIMITER, REQUIRED_HEADERS

_BOM = "\ufeff"
_QUOTE = '"'


class MissingHeaderError(ValueError):
    """
    Raised when required headers are absent from the first row.
    """

    def __init__(self, missing: Sequence[str], headers: Sequence[str]) -> None:
        missing_csv = ", ".join(missing)
        headers_csv = ", ".join(headers) if headers else "<none>"
        super().__init__(
            f"Missing required headers: {missing_csv}. CSV headers: {headers_csv}"
        )
        self.missing = tuple(missing)
        self.headers = tuple(headers)


@dataclass(frozen=True)
class ParsedRow:
    """
    One data row: physical line number (header is line 1) and its cells.
    """

    row_number: int
    cells: tuple[str, ...]

    def get(self, header_map: dict[str, int], header: str) -> str:
        index = header_map.get(header)
        if index is None or index >= len(self.cells):
            return ""
        return self.cells[index]


@dataclass(frozen=True)
class ParsedTable:
    headers: tuple[str, ...]
    header_map: dict[str, int]
    rows: tuple[ParsedRow, ...]


class RowParser:
    """
    Parses raw budget CSV text into a header map and data rows.
    """

    def __init__(
        self,
        *,
        delimiter: str = CSV_DELIMITER,
        required_headers: Sequence[str] = REQUIRED_HEADERS,
    ) -> None:
        if len(delimiter) != 1:
            raise ValueError("Delimiter must be a single character.")
        self._delimiter = delimiter
        self._required_headers = tuple(required_headers)

    def parse(self, text: str) -> ParsedTable:
        """
        Parse the header row and every non-empty data row.

        Raises MissingHeaderError before touching any data row when a required
        header is absent.
        """

        lines = self._split_lines(text)
        if not lines or not lines[0].strip():
            raise MissingHeaderError(missing=self._required_headers, headers=())

        headers = self.split_cells(lines[0])
        header_map = self.build_header_map(headers)

        missing = [header for header in self._required_headers if header not in header_map]
        if missing:
            raise MissingHeaderError(missing=missing, headers=headers)

        rows = tuple(self._iter_rows(lines))
        return ParsedTable(headers=headers, header_map=header_map, rows=rows)

    def split_cells(self, line: str) -> tuple[str, ...]:
        """
        Split one line on the delimiter, honouring quoted sections.
        """

        cells: list[str] = []
        current: list[str] = []
        in_quotes = False

        for char in line:
            if char == _QUOTE:
                in_quotes = not in_quotes
                continue
            if char == self._delimiter and not in_quotes:
                cells.append("".join(current).strip())
                current = []
                continue
            current.append(char)

        cells.append("".join(current).strip())
        return tuple(cells)

    @staticmethod
    def build_header_map(headers: Sequence[str]) -> dict[str, int]:
        """
        Map each header name to its first column index.
        """

        header_map: dict[str, int] = {}
        for index, header in enumerate(headers):
            if header and header not in header_map:
                header_map[header] = index
        return header_map

    def _iter_rows(self, lines: list[str]) -> Iterator[ParsedRow]:
        for index, line in enumerate(lines[1:], start=2):
            if not line.strip():
                continue
            yield ParsedRow(row_number=index, cells=self.split_cells(line))

    @staticmethod
    def _split_lines(text: str) -> list[str]:
        if text.startswith(_BOM):
            text = text[len(_BOM):]
        return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
