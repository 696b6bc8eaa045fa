"""Indentation-based list lines <-> nested item tree."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List

from .dialect import LIST_INDENT, LIST_INDENT_WIDTH, TAB_WIDTH
from .model import InlineElement, ListItem

# A bare marker is an empty item.
ORDERED_LIST_RE = re.compile(r"^(\s*)\d+\.(?:\s+(.*))?$")
UNORDERED_LIST_RE = re.compile(r"^(\s*)[-*+](?:\s+(.*))?$")
TASK_LIST_RE = re.compile(r"^(\s*)[-*+]\s+\[([ xX])\]\s*(.*)$")


@dataclass
class ListLine:
    indent: int
    content: str
    checked: bool | None = None

    @property
    def depth(self) -> int:
        return self.indent // LIST_INDENT_WIDTH


def _indent_width(prefix: str) -> int:
    return len(prefix.expandtabs(TAB_WIDTH))


def list_style_of(line: str) -> str | None:
    """Which list style a line opens; checkboxes win over plain bullets."""
    if ORDERED_LIST_RE.match(line):
        return "ordered"
    if TASK_LIST_RE.match(line):
        return "checklist"
    if UNORDERED_LIST_RE.match(line):
        return "unordered"
    return None


def match_list_line(line: str, style: str) -> ListLine | None:
    """Parse ``line`` as an item of a list of ``style``; ``None`` ends that list."""
    if style == "ordered":
        match = ORDERED_LIST_RE.match(line)
        if match:
            return ListLine(_indent_width(match.group(1)), (match.group(2) or "").strip())
        return None
    if style == "checklist":
        match = TASK_LIST_RE.match(line)
        if match:
            checked = match.group(2).lower() == "x"
            return ListLine(_indent_width(match.group(1)), match.group(3).strip(), checked)
        return None
    if TASK_LIST_RE.match(line):
        return None
    match = UNORDERED_LIST_RE.match(line)
    if match:
        return ListLine(_indent_width(match.group(1)), (match.group(2) or "").strip())
    return None


def build_list_tree(
    lines: Iterable[ListLine],
    parse_content: Callable[[str], List[InlineElement]],
) -> List[ListItem]:
    """Fold flat lines into a tree: a line nests under the nearest shallower line."""
    roots: List[ListItem] = []
    stack: List[tuple[int, ListItem]] = []
    for line in lines:
        item = ListItem(inline=parse_content(line.content), checked=line.checked)
        while stack and stack[-1][0] >= line.indent:
            stack.pop()
        if stack:
            stack[-1][1].items.append(item)
        else:
            roots.append(item)
        stack.append((line.indent, item))
    return roots


def flatten_list_tree(
    items: Iterable[ListItem],
    style: str,
    render_content: Callable[[List[InlineElement]], str],
    depth: int = 0,
) -> List[str]:
    """Depth-first lines, ``LIST_INDENT`` per level; numbering restarts per sibling group."""
    lines: List[str] = []
    for index, item in enumerate(items, start=1):
        if style == "ordered":
            marker = f"{index}. "
        elif style == "checklist":
            marker = f"- [{'x' if item.checked else ' '}] "
        else:
            marker = "- "
        lines.append(f"{LIST_INDENT * depth}{marker}{render_content(item.inline)}".rstrip())
        if item.items:
            lines.extend(flatten_list_tree(item.items, style, render_content, depth + 1))
    return lines
