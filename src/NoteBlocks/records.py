"""Blocks <-> JSON-ready ``{"id", "type", "data"}`` records for the editor layer."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping

from . import dialect
from .callouts import normalize_callout_kind
from .hrefs import sanitize_href
from .model import (
    Block,
    CalloutBlock,
    CodeBlock,
    DiagramBlock,
    Document,
    Heading,
    HorizontalRule,
    InlineBold,
    InlineBreak,
    InlineCode,
    InlineElement,
    InlineItalic,
    InlineLink,
    InlineStrike,
    InlineText,
    InlineWikilink,
    ListBlock,
    ListItem,
    OpaqueBlock,
    Paragraph,
    QuoteBlock,
    RawBlock,
    TableBlock,
)

logger = logging.getLogger(__name__)

_SPAN_NAMES = {InlineBold: "bold", InlineItalic: "italic", InlineStrike: "strike"}
_SPAN_CLASSES = {name: cls for cls, name in _SPAN_NAMES.items()}


def document_to_records(doc: Document) -> dict[str, Any]:
    return {"blocks": [block_to_record(block) for block in doc.blocks]}


def document_from_records(payload: Mapping[str, Any] | None) -> Document:
    blocks = (payload or {}).get("blocks") or []
    return Document(blocks=[block_from_record(record) for record in blocks if isinstance(record, Mapping)])


def block_to_record(block: Block) -> dict[str, Any]:
    if isinstance(block, OpaqueBlock):
        record: dict[str, Any] = {"type": block.type_name, "data": dict(block.data)}
    else:
        record = {"type": block.block_type, "data": _block_data(block)}
    if block.id is not None:
        record = {"id": block.id, **record}
    return record


def _block_data(block: Block) -> dict[str, Any]:
    if isinstance(block, Heading):
        return {"level": block.level, "text": inline_to_records(block.inline)}
    if isinstance(block, Paragraph):
        return {"text": inline_to_records(block.inline)}
    if isinstance(block, QuoteBlock):
        return {"text": block.text}
    if isinstance(block, CalloutBlock):
        return {"kind": block.kind, "message": inline_to_records(block.message)}
    if isinstance(block, ListBlock):
        return {"style": block.style, "items": [_item_to_record(item) for item in block.items]}
    if isinstance(block, TableBlock):
        return {"withHeadings": block.with_headings, "content": [list(row) for row in block.rows]}
    if isinstance(block, CodeBlock):
        return {"language": block.language, "code": block.code}
    if isinstance(block, DiagramBlock):
        return {"code": block.code}
    if isinstance(block, RawBlock):
        return {"markdown": block.markdown}
    return {}


def _item_to_record(item: ListItem) -> dict[str, Any]:
    record: dict[str, Any] = {
        "content": inline_to_records(item.inline),
        "items": [_item_to_record(child) for child in item.items],
    }
    if item.checked is not None:
        record["checked"] = item.checked
    return record


def block_from_record(record: Mapping[str, Any]) -> Block:
    """Build a block from a record; unknown types are kept as ``OpaqueBlock``."""
    type_name = str(record.get("type") or "")
    data = record.get("data")
    if not isinstance(data, Mapping):
        data = {}
    block_id = record.get("id")
    block_id = str(block_id) if block_id is not None else None

    if type_name in ("heading", "header"):
        block: Block = Heading(level=_heading_level(data.get("level")), inline=inline_from_records(data.get("text")))
    elif type_name == "paragraph":
        block = Paragraph(inline=inline_from_records(data.get("text")))
    elif type_name == "quote":
        block = QuoteBlock(text=str(data.get("text") or ""))
    elif type_name == "callout":
        block = CalloutBlock(
            kind=normalize_callout_kind(str(data.get("kind") or "")),
            message=inline_from_records(data.get("message")),
        )
    elif type_name == "list":
        style = data.get("style")
        block = ListBlock(
            style=style if style in dialect.LIST_STYLES else "unordered",
            items=_items_from_records(data.get("items")),
        )
    elif type_name == "table":
        rows = [row for row in _sequence(data.get("content")) if isinstance(row, (list, tuple))]
        block = TableBlock(
            rows=[["" if cell is None else str(cell) for cell in row] for row in rows],
            with_headings=bool(data.get("withHeadings", True)),
        )
    elif type_name == "code":
        block = CodeBlock(language=str(data.get("language") or ""), code=str(data.get("code") or ""))
    elif type_name in ("diagram", dialect.DIAGRAM_LANGUAGE):
        block = DiagramBlock(code=str(data.get("code") or ""))
    elif type_name == "delimiter":
        block = HorizontalRule()
    elif type_name == "raw":
        block = RawBlock(markdown=str(data.get("markdown") or ""))
    else:
        logger.debug("Keeping unknown block type %r as opaque payload", type_name)
        block = OpaqueBlock(type_name=type_name, data=dict(data))
    block.id = block_id
    return block


def _heading_level(value: Any) -> int:
    try:
        level = int(value)
    except (TypeError, ValueError):
        return dialect.DEFAULT_HEADING_LEVEL
    return max(1, min(dialect.MAX_HEADING_LEVEL, level))


def _sequence(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def _items_from_records(value: Any) -> List[ListItem]:
    items: List[ListItem] = []
    for entry in _sequence(value):
        if isinstance(entry, str):
            items.append(ListItem(inline=[InlineText(entry)] if entry else []))
            continue
        if not isinstance(entry, Mapping):
            continue
        checked = entry.get("checked")
        items.append(
            ListItem(
                inline=inline_from_records(entry.get("content")),
                checked=bool(checked) if checked is not None else None,
                items=_items_from_records(entry.get("items")),
            )
        )
    return items


def inline_to_records(nodes: Iterable[InlineElement]) -> List[dict[str, Any]]:
    records: List[dict[str, Any]] = []
    for node in nodes:
        if isinstance(node, InlineText):
            records.append({"type": "text", "text": node.text})
        elif isinstance(node, InlineBreak):
            records.append({"type": "break"})
        elif isinstance(node, InlineCode):
            records.append({"type": "code", "code": node.code})
        elif isinstance(node, InlineWikilink):
            records.append({"type": "wikilink", "target": node.target, "alias": node.alias})
        elif isinstance(node, InlineLink):
            records.append({"type": "link", "href": node.href, "children": inline_to_records(node.children)})
        elif type(node) in _SPAN_NAMES:
            records.append({"type": _SPAN_NAMES[type(node)], "children": inline_to_records(node.children)})
    return records


def inline_from_records(value: Any) -> List[InlineElement]:
    if isinstance(value, str):
        return [InlineText(value)] if value else []
    nodes: List[InlineElement] = []
    for entry in _sequence(value):
        if not isinstance(entry, Mapping):
            continue
        kind = entry.get("type")
        if kind == "text":
            nodes.append(InlineText(str(entry.get("text") or "")))
        elif kind == "break":
            nodes.append(InlineBreak())
        elif kind == "code":
            nodes.append(InlineCode(str(entry.get("code") or "")))
        elif kind == "wikilink" and str(entry.get("target") or "").strip():
            alias = entry.get("alias")
            nodes.append(InlineWikilink(target=str(entry["target"]).strip(), alias=str(alias) if alias else None))
        elif kind == "link":
            children = inline_from_records(entry.get("children"))
            href = sanitize_href(entry.get("href"))
            if href:
                nodes.append(InlineLink(children=children, href=href))
            else:
                nodes.extend(children)
        elif kind in _SPAN_CLASSES:
            nodes.append(_SPAN_CLASSES[kind](children=inline_from_records(entry.get("children"))))
    return nodes
