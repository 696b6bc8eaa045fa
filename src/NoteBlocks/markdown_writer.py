from __future__ import annotations

import dataclasses
import json
import logging
import re
from typing import Any, Iterable, List

from . import dialect
from .callouts import normalize_callout_kind
from .inline import inline_to_markdown
from .lists import ORDERED_LIST_RE, UNORDERED_LIST_RE, flatten_list_tree
from .markdown_parser import HEADING_RE, HR_RE, is_raw_fallback_start
from .model import (
    Block,
    CalloutBlock,
    CodeBlock,
    DiagramBlock,
    Document,
    Heading,
    HorizontalRule,
    InlineElement,
    ListBlock,
    OpaqueBlock,
    Paragraph,
    QuoteBlock,
    RawBlock,
    TableBlock,
)
from .tables import column_count, format_row, pad_rows, separator_row
from .utils import normalize_multiline, normalize_newlines

logger = logging.getLogger(__name__)

_ORDERED_MARKER_RE = re.compile(r"^(\d+)\.")
_TRAILING_WS_RE = re.compile(r"[ \t]+$", re.MULTILINE)
_CALLOUT_LIKE_RE = re.compile(r"^(\s*)(\\*\[!)")
_BACKTICK_RUN_RE = re.compile(r"`{3,}")


def render_markdown(doc: Document) -> str:
    """Canonical markdown: blocks separated by one blank line, one trailing newline."""
    return render_blocks(doc.blocks)


def render_blocks(blocks: Iterable[Block]) -> str:
    rendered: List[str] = []
    for block in blocks:
        text = render_block(block)
        if isinstance(block, Heading):
            # Keep the marker's trailing space on empty headings.
            text = text.strip("\n")
        else:
            text = normalize_multiline(text)
        if text:
            rendered.append(text)
    return "\n\n".join(rendered) + "\n"


def render_block(block: Block) -> str:
    if isinstance(block, Heading):
        return _render_heading(block)
    if isinstance(block, Paragraph):
        return _render_paragraph(block.inline)
    if isinstance(block, ListBlock):
        return _render_list(block)
    if isinstance(block, QuoteBlock):
        return _render_quote(block)
    if isinstance(block, CalloutBlock):
        return _render_callout(block)
    if isinstance(block, TableBlock):
        return _render_table(block)
    if isinstance(block, DiagramBlock):
        return render_fence(dialect.DIAGRAM_LANGUAGE, normalize_newlines(block.code).strip())
    if isinstance(block, CodeBlock):
        code = _TRAILING_WS_RE.sub("", normalize_newlines(block.code))
        return render_fence(block.language.strip(), code)
    if isinstance(block, HorizontalRule):
        return "---"
    if isinstance(block, RawBlock):
        return normalize_multiline(block.markdown)
    return _render_fallback(block)


def _render_heading(heading: Heading) -> str:
    level = max(1, min(dialect.MAX_HEADING_LEVEL, int(heading.level or 1)))
    text = inline_to_markdown(heading.inline, single_line=True).strip()
    return f"{'#' * level} {text}" if text else f"{'#' * level} "


def _render_paragraph(inline: List[InlineElement]) -> str:
    text = normalize_multiline(inline_to_markdown(inline))
    return "\n".join(escape_block_start(line) for line in text.split("\n"))


def escape_block_start(line: str) -> str:
    """Escape a leading marker that would make the line parse as another block kind."""
    line = line.lstrip()
    if not line:
        return line
    if _ORDERED_MARKER_RE.match(line) and ORDERED_LIST_RE.match(line):
        return _ORDERED_MARKER_RE.sub(r"\1\\.", line, count=1)
    if (
        HEADING_RE.match(line)
        or HR_RE.match(line)
        or UNORDERED_LIST_RE.match(line)
        or line.startswith(">")
        or is_raw_fallback_start(line)
    ):
        return "\\" + line
    return line


def _render_list(block: ListBlock) -> str:
    style = block.style if block.style in dialect.LIST_STYLES else "unordered"
    lines = flatten_list_tree(block.items, style, _render_list_content)
    return "\n".join(lines)


def _render_list_content(inline: List[InlineElement]) -> str:
    return inline_to_markdown(inline, single_line=True).strip()


def _render_quote(block: QuoteBlock) -> str:
    text = normalize_multiline(block.text)
    if not text:
        return ">"
    return _prefix_lines(_CALLOUT_LIKE_RE.sub(r"\1\\\2", text, count=1))


def _render_callout(block: CalloutBlock) -> str:
    marker = f"> [!{normalize_callout_kind(block.kind)}]"
    message = normalize_multiline(inline_to_markdown(block.message))
    if not message:
        return marker
    return f"{marker}\n{_prefix_lines(message)}"


def _prefix_lines(text: str) -> str:
    return "\n".join(f"> {line}" for line in text.split("\n"))


def _render_table(block: TableBlock) -> str:
    rows = [[str(cell or "") for cell in row] for row in block.rows if row]
    if not rows:
        return ""
    width = column_count(rows, dialect.MIN_TABLE_COLUMNS)
    rows = pad_rows(rows, width)
    if block.with_headings:
        header, body = rows[0], rows[1:]
    else:
        header, body = [""] * width, rows
    return "\n".join([format_row(header), separator_row(width), *(format_row(row) for row in body)])


def render_fence(language: str, code: str) -> str:
    """Fence one backtick longer than any backtick run inside ``code`` (minimum three)."""
    longest = max((len(run) for run in _BACKTICK_RUN_RE.findall(code)), default=2)
    fence = "`" * max(3, longest + 1)
    return f"{fence}{language}\n{code}\n{fence}"


def _render_fallback(block: Block) -> str:
    if isinstance(block, OpaqueBlock):
        payload: dict[str, Any] = {"type": block.type_name, "data": block.data}
    else:
        payload = {"type": type(block).__name__, "data": _dataclass_payload(block)}
    logger.debug("Rendering unknown block kind %r through the JSON fallback", payload["type"])
    dump = json.dumps(payload, indent=2, ensure_ascii=False, default=str)
    return render_fence(dialect.FALLBACK_FENCE_LANGUAGE, dump)


def _dataclass_payload(block: Block) -> dict[str, Any]:
    if dataclasses.is_dataclass(block):
        data = dataclasses.asdict(block)
        data.pop("id", None)
        return data
    return {}
