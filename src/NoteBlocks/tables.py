from __future__ import annotations

import re
from typing import List, Sequence

from .dialect import CELL_LINE_BREAK, MIN_TABLE_COLUMNS, TABLE_SEPARATOR_CELL
from .utils import normalize_newlines

_UNESCAPED_PIPE_RE = re.compile(r"(?<!\\)\|")
_SEPARATOR_CELL_RE = re.compile(r"^:?-{3,}:?$")
_CELL_BREAK_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)


def parse_row(line: str, allow_empty: bool = False) -> List[str] | None:
    """Split a pipe-delimited row into cells, or ``None`` if it is not a row."""
    trimmed = line.strip()
    if not trimmed or "|" not in trimmed:
        return None
    if not trimmed.startswith("|") and not trimmed.endswith("|"):
        return None

    inner = trimmed
    if inner.startswith("|"):
        inner = inner[1:]
    if inner.endswith("|") and not inner.endswith("\\|"):
        inner = inner[:-1]
    cells = [_unescape_cell(cell.strip()) for cell in _UNESCAPED_PIPE_RE.split(inner)]
    if not allow_empty and all(not cell for cell in cells):
        return None
    return cells


def _unescape_cell(cell: str) -> str:
    return _CELL_BREAK_RE.sub("\n", cell.replace("\\|", "|"))


def is_separator_row(line: str, expected_columns: int) -> bool:
    cells = parse_row(line)
    if cells is None or len(cells) != expected_columns:
        return False
    return all(_SEPARATOR_CELL_RE.match(re.sub(r"\s+", "", cell)) for cell in cells)


def is_table_start(lines: Sequence[str], index: int) -> bool:
    """Header row (possibly all blank) followed by a matching separator row."""
    if index + 1 >= len(lines):
        return False
    header = parse_row(lines[index], allow_empty=True)
    if header is None or len(header) < MIN_TABLE_COLUMNS:
        return False
    return is_separator_row(lines[index + 1], len(header))


def column_count(rows: Sequence[Sequence[str]], minimum: int = 0) -> int:
    return max([len(row) for row in rows] + [minimum])


def pad_rows(rows: Sequence[Sequence[str]], minimum: int = 0) -> List[List[str]]:
    """Pad every row with empty cells up to the widest row; never truncates."""
    width = column_count(rows, minimum)
    return [list(row) + [""] * (width - len(row)) for row in rows]


def escape_cell(value: str) -> str:
    value = normalize_newlines(value).strip()
    return value.replace("|", "\\|").replace("\n", CELL_LINE_BREAK)


def format_row(cells: Sequence[str]) -> str:
    return "| " + " | ".join(escape_cell(str(cell)) for cell in cells) + " |"


def separator_row(width: int) -> str:
    return "| " + " | ".join([TABLE_SEPARATOR_CELL] * width) + " |"
