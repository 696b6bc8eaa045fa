"""Pasted HTML -> note markdown, plus the plain-text paste heuristics."""

from __future__ import annotations

import logging
import re
from typing import Callable, Dict, List
from urllib.parse import unquote

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from . import dialect
from .hrefs import sanitize_href
from .inline import escape_markdown_text, format_code_span, format_destination, format_wikilink, wrap_delimiters
from .markdown_writer import escape_block_start, render_fence
from .tables import format_row, pad_rows, separator_row
from .utils import normalize_multiline

logger = logging.getLogger(__name__)

WIKILINK_SCHEME = "wikilink:"

BLOCKED_TAGS = frozenset(
    {"script", "style", "iframe", "object", "embed", "link", "meta", "base", "template", "noscript"}
)
# Whitespace-only text directly inside these is layout noise.
_BLOCK_CONTAINERS = frozenset(
    {"[document]", "html", "head", "body", "div", "section", "article", "ul", "ol",
     "table", "thead", "tbody", "tfoot", "tr", "blockquote", "pre"}
)

_WHITESPACE_RE = re.compile(r"\s+")
_LINE_BREAKS_RE = re.compile(r"[ \t]*\n\s*")
_EXCESS_BLANK_RE = re.compile(r"\n{3,}")
_MARKDOWN_HINT_RE = re.compile(
    r"(^#{1,6}\s)|(^\s*[-*+]\s)|(^\s*[-*+]\s+\[[ xX]?\])|(^\s*\d+\.\s)|(^>\s)|(```)|(\[[^\]]+\]\([^)]+\))",
    re.MULTILINE,
)


def looks_like_markdown(text: str) -> bool:
    """Common markdown starters: headings, list markers, quotes, fences, ``[a](b)``."""
    return bool(_MARKDOWN_HINT_RE.search(text or ""))


def is_likely_markdown_paste(plain: str, html: str | None = None) -> bool:
    # The plain flavour wins whenever it already reads as markdown, even if HTML came along.
    if not (plain or "").strip():
        return False
    return looks_like_markdown(plain)


def html_to_markdown(html: str) -> str:
    """Convert an HTML fragment to markdown text that ``parse_markdown`` accepts."""
    soup = BeautifulSoup(html or "", "html.parser")
    text = _EXCESS_BLANK_RE.sub("\n\n", normalize_multiline(_convert_children(soup))).strip()
    logger.debug("Converted %d chars of HTML into %d chars of markdown", len(html or ""), len(text))
    return text + "\n" if text else ""


def _convert(node) -> str:
    if isinstance(node, PreformattedString):
        # comments, doctypes, CDATA, processing instructions
        return ""
    if isinstance(node, NavigableString):
        text = _WHITESPACE_RE.sub(" ", str(node))
        if not text.strip() and _tag_name(node.parent) in _BLOCK_CONTAINERS:
            return ""
        return escape_markdown_text(text)
    if not isinstance(node, Tag):
        return ""
    name = _tag_name(node)
    if name in BLOCKED_TAGS:
        return ""
    handler = _HANDLERS.get(name)
    if handler is not None:
        return handler(node)
    return _convert_children(node)


def _convert_children(node: Tag) -> str:
    return "".join(_convert(child) for child in node.children)


def _tag_name(node) -> str:
    return (getattr(node, "name", None) or "").lower()


def _single_line(text: str) -> str:
    return _LINE_BREAKS_RE.sub(" ", text).strip()


def _block(text: str) -> str:
    return f"\n\n{text}\n\n" if text else ""


def _heading(node: Tag) -> str:
    text = _single_line(_convert_children(node))
    if not text:
        return ""
    return _block(f"{'#' * int(node.name[1])} {text}")


def _paragraph(node: Tag) -> str:
    text = normalize_multiline(_convert_children(node)).strip()
    return _block("\n".join(escape_block_start(line) for line in text.split("\n")))


def _division(node: Tag) -> str:
    text = _convert_children(node)
    return f"\n{text}\n" if text.strip() else ""


def _emphasis(marker: str) -> Callable[[Tag], str]:
    def convert(node: Tag) -> str:
        return wrap_delimiters(marker, _convert_children(node))

    return convert


def _inline_code(node: Tag) -> str:
    return format_code_span(node.get_text().replace("\n", " "))


def _line_break(node: Tag) -> str:
    return "\n"


def _thematic_break(node: Tag) -> str:
    return _block("---")


def _anchor(node: Tag) -> str:
    label = _single_line(_convert_children(node))
    href = str(node.get("href") or "").strip()
    target = str(node.get("data-wikilink-target") or "").strip()
    if not target and href.lower().startswith(WIKILINK_SCHEME):
        target = unquote(href[len(WIKILINK_SCHEME):]).strip()
    if target:
        return format_wikilink(target, _single_line(node.get_text()))
    if not href:
        return label
    safe = sanitize_href(href)
    if safe is None:
        return f"\\[{label}\\]" if label else ""
    return f"[{label or escape_markdown_text(safe)}]({format_destination(safe)})"


def _list(node: Tag) -> str:
    return _block("\n".join(_list_lines(node, 0)))


def _list_lines(node: Tag, depth: int) -> List[str]:
    ordered = _tag_name(node) == "ol"
    lines: List[str] = []
    index = 0
    for child in node.children:
        name = _tag_name(child)
        if name in ("ul", "ol"):
            lines.extend(_list_lines(child, depth + 1))
            continue
        if name != "li":
            continue
        checked = None
        nested: List[Tag] = []
        parts: List[str] = []
        for part in child.children:
            part_name = _tag_name(part)
            if part_name in ("ul", "ol"):
                nested.append(part)
            elif part_name == "input" and str(part.get("type") or "").lower() == "checkbox":
                checked = part.has_attr("checked")
            else:
                parts.append(_convert(part))
        content = _single_line("".join(parts))
        if content:
            index += 1
            if ordered:
                marker = f"{index}. "
            elif checked is not None:
                marker = f"- [{'x' if checked else ' '}] "
            else:
                marker = "- "
            lines.append(f"{dialect.LIST_INDENT * depth}{marker}{content}")
        for sub in nested:
            lines.extend(_list_lines(sub, depth + 1))
    return lines


def _list_item(node: Tag) -> str:
    # <li> outside of any list
    content = _single_line(_convert_children(node))
    return f"\n- {content}\n" if content else ""


def _blockquote(node: Tag) -> str:
    text = _EXCESS_BLANK_RE.sub("\n\n", normalize_multiline(_convert_children(node))).strip()
    if not text:
        return ""
    return _block("\n".join(f"> {line}" if line else ">" for line in text.split("\n")))


def _preformatted(node: Tag) -> str:
    language = _code_language(node)
    code_tag = node.find("code")
    if not language and isinstance(code_tag, Tag):
        language = _code_language(code_tag)
    code = node.get_text().replace("\r\n", "\n").strip("\n")
    return _block(render_fence(language, code))


def _code_language(node: Tag) -> str:
    for cls in node.get("class") or []:
        if cls.startswith("language-"):
            return cls[len("language-"):]
    return ""


def _table(node: Tag) -> str:
    rows: List[List[str]] = []
    for tr in node.find_all("tr"):
        cells = [
            normalize_multiline(_convert_children(cell)).strip()
            for cell in tr.find_all(["th", "td"], recursive=False)
        ]
        if cells:
            rows.append(cells)
    if not rows:
        return ""
    rows = pad_rows(rows, dialect.MIN_TABLE_COLUMNS)
    width = len(rows[0])
    lines = [format_row(rows[0]), separator_row(width), *(format_row(row) for row in rows[1:])]
    return _block("\n".join(lines))


_HANDLERS: Dict[str, Callable[[Tag], str]] = {
    **{f"h{level}": _heading for level in range(1, 7)},
    "p": _paragraph,
    "div": _division,
    "strong": _emphasis("**"),
    "b": _emphasis("**"),
    "em": _emphasis("*"),
    "i": _emphasis("*"),
    "s": _emphasis("~~"),
    "strike": _emphasis("~~"),
    "del": _emphasis("~~"),
    "code": _inline_code,
    "br": _line_break,
    "hr": _thematic_break,
    "a": _anchor,
    "ul": _list,
    "ol": _list,
    "li": _list_item,
    "blockquote": _blockquote,
    "pre": _preformatted,
    "table": _table,
}
