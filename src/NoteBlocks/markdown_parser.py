from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional, Sequence, Tuple

from . import dialect
from .callouts import normalize_callout_kind
from .inline import parse_inline
from .lists import ORDERED_LIST_RE, UNORDERED_LIST_RE, build_list_tree, list_style_of, match_list_line
from .model import (
    Block,
    CalloutBlock,
    CodeBlock,
    DiagramBlock,
    Document,
    Heading,
    HorizontalRule,
    ListBlock,
    Paragraph,
    QuoteBlock,
    RawBlock,
    TableBlock,
)
from .tables import is_table_start, pad_rows, parse_row
from .utils import normalize_multiline, normalize_newlines

logger = logging.getLogger(__name__)

HEADING_RE = re.compile(r"^(#{1,6})(?:[ \t]+(.*))?$")
HR_RE = re.compile(r"^\s{0,3}([-*_])(?:\s*\1){2,}\s*$")
FENCE_START_RE = re.compile(r"^(`{3,})\s*([^`]*)$")
FENCE_END_RE = re.compile(r"^(`{3,})\s*$")
CALLOUT_MARKER_RE = re.compile(r"^\[!([A-Za-z0-9_-]+)\]\s*(.*)$")
QUOTE_PREFIX_RE = re.compile(r"^>\s?")
# A leading backslash keeps a quoted `[!TOKEN]` line from turning into a callout.
ESCAPED_CALLOUT_RE = re.compile(r"^(\s*)\\(\\*\[!)")

ParseResult = Optional[Tuple[Block, int]]


def parse_markdown(text: str) -> Document:
    """Split markdown into blocks. Never raises; odd input degrades to raw/paragraph blocks."""
    lines = normalize_newlines(text).split("\n")
    blocks: List[Block] = []
    i = 0
    while i < len(lines):
        if not lines[i].strip():
            i += 1
            continue
        for rule in BLOCK_RULES:
            result = rule(lines, i)
            if result is not None:
                block, i = result
                blocks.append(block)
                break
    return Document(blocks=blocks)


def try_parse_heading(lines: Sequence[str], index: int) -> ParseResult:
    match = HEADING_RE.match(lines[index])
    if not match:
        return None
    content = (match.group(2) or "").strip()
    return Heading(level=len(match.group(1)), inline=parse_inline(content)), index + 1


def try_parse_thematic_break(lines: Sequence[str], index: int) -> ParseResult:
    if not HR_RE.match(lines[index]):
        return None
    return HorizontalRule(), index + 1


def try_parse_fence(lines: Sequence[str], index: int) -> ParseResult:
    match = FENCE_START_RE.match(lines[index])
    if not match:
        return None
    fence_width = len(match.group(1))
    language = match.group(2).strip()
    i = index + 1
    code_lines: List[str] = []
    while i < len(lines) and not _closes_fence(lines[i], fence_width):
        code_lines.append(lines[i])
        i += 1
    if i < len(lines):
        i += 1
    else:
        logger.debug("Unterminated fence at line %d consumed to end of input", index + 1)

    code = "\n".join(code_lines)
    if language.lower() == dialect.DIAGRAM_LANGUAGE:
        return DiagramBlock(code=code), i
    return CodeBlock(language=language, code=code), i


def _closes_fence(line: str, fence_width: int) -> bool:
    match = FENCE_END_RE.match(line)
    return bool(match) and len(match.group(1)) >= fence_width


def try_parse_quote(lines: Sequence[str], index: int) -> ParseResult:
    if not lines[index].startswith(">"):
        return None
    i = index
    quote_lines: List[str] = []
    while i < len(lines) and lines[i].startswith(">"):
        quote_lines.append(QUOTE_PREFIX_RE.sub("", lines[i], count=1))
        i += 1

    marker = CALLOUT_MARKER_RE.match(quote_lines[0].strip())
    if marker:
        lead = marker.group(2).strip()
        message_lines = ([lead] if lead else []) + quote_lines[1:]
        message = normalize_multiline("\n".join(message_lines))
        return CalloutBlock(kind=normalize_callout_kind(marker.group(1)), message=parse_inline(message)), i
    quote_lines[0] = ESCAPED_CALLOUT_RE.sub(r"\1\2", quote_lines[0], count=1)
    return QuoteBlock(text="\n".join(quote_lines)), i


def try_parse_table(lines: Sequence[str], index: int) -> ParseResult:
    if not is_table_start(lines, index):
        return None
    header = parse_row(lines[index], allow_empty=True) or []
    rows = [header]
    i = index + 2
    while i < len(lines):
        row = parse_row(lines[i], allow_empty=True)
        if row is None:
            break
        rows.append(row)
        i += 1
    return TableBlock(rows=pad_rows(rows), with_headings=True), i


def try_parse_list(lines: Sequence[str], index: int) -> ParseResult:
    style = list_style_of(lines[index])
    if style is None:
        return None
    flat = []
    i = index
    while i < len(lines):
        item = match_list_line(lines[i], style)
        if item is None:
            break
        flat.append(item)
        i += 1
    return ListBlock(style=style, items=build_list_tree(flat, parse_inline)), i


def is_raw_fallback_start(line: str) -> bool:
    if line.startswith("    ") or line.startswith("\t"):
        return True
    return line.lstrip().startswith(("|", "<"))


def try_parse_raw(lines: Sequence[str], index: int) -> ParseResult:
    if not is_raw_fallback_start(lines[index]):
        return None
    i = index
    raw_lines: List[str] = []
    while i < len(lines) and lines[i].strip():
        raw_lines.append(lines[i])
        i += 1
    return RawBlock(markdown="\n".join(raw_lines)), i


def is_block_start(lines: Sequence[str], index: int) -> bool:
    line = lines[index]
    return bool(
        HEADING_RE.match(line)
        or HR_RE.match(line)
        or FENCE_START_RE.match(line)
        or line.startswith(">")
        or ORDERED_LIST_RE.match(line)
        or UNORDERED_LIST_RE.match(line)
        or is_raw_fallback_start(line)
        or is_table_start(lines, index)
    )


def parse_paragraph(lines: Sequence[str], index: int) -> Tuple[Block, int]:
    # Always consumes at least the line at ``index``.
    i = index
    paragraph_lines: List[str] = []
    while i < len(lines) and lines[i].strip():
        if i > index and is_block_start(lines, i):
            break
        paragraph_lines.append(lines[i].strip())
        i += 1
    return Paragraph(inline=parse_inline("\n".join(paragraph_lines))), i


BLOCK_RULES: Tuple[Callable[[Sequence[str], int], ParseResult], ...] = (
    try_parse_heading,
    try_parse_thematic_break,
    try_parse_fence,
    try_parse_quote,
    try_parse_table,
    try_parse_list,
    try_parse_raw,
    parse_paragraph,
)
