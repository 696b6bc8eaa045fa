"""Structured lookups for outline and link-graph consumers."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Tuple

from .inline import inline_to_text, iter_wikilinks, parse_inline
from .model import CalloutBlock, Document, Heading, InlineElement, ListItem, ListBlock, Paragraph, TableBlock
from .wikilinks import slugify_heading


def document_outline(doc: Document) -> List[Tuple[int, str, str]]:
    """``(level, text, slug)`` for every heading, in document order."""
    outline = []
    for block in doc.blocks:
        if isinstance(block, Heading):
            text = inline_to_text(block.inline).strip()
            outline.append((block.level, text, slugify_heading(text)))
    return outline


def linked_targets(doc: Document) -> List[str]:
    seen: dict[str, None] = {}
    for nodes in _inline_runs(doc):
        for link in iter_wikilinks(nodes):
            seen.setdefault(link.target, None)
    return list(seen)


def _inline_runs(doc: Document) -> Iterator[List[InlineElement]]:
    for block in doc.blocks:
        if isinstance(block, (Heading, Paragraph)):
            yield block.inline
        elif isinstance(block, CalloutBlock):
            yield block.message
        elif isinstance(block, ListBlock):
            yield from _item_runs(block.items)
        elif isinstance(block, TableBlock):
            for row in block.rows:
                for cell in row:
                    yield parse_inline(cell)


def _item_runs(items: Iterable[ListItem]) -> Iterator[List[InlineElement]]:
    for item in items:
        yield item.inline
        yield from _item_runs(item.items)
