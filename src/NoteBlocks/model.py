from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, List


@dataclass
class Block:
    """Base class for block-level nodes."""

    block_type: ClassVar[str] = ""
    id: str | None = field(default=None, kw_only=True)


@dataclass
class Document:
    blocks: List[Block]
    metadata: dict[str, Any] | None = None


@dataclass
class Heading(Block):
    block_type: ClassVar[str] = "heading"
    level: int
    inline: List["InlineElement"] = field(default_factory=list)


@dataclass
class Paragraph(Block):
    block_type: ClassVar[str] = "paragraph"
    inline: List["InlineElement"] = field(default_factory=list)


@dataclass
class QuoteBlock(Block):
    """Quoted text; nested quote markers stay literal inside ``text``."""

    block_type: ClassVar[str] = "quote"
    text: str = ""


@dataclass
class CalloutBlock(Block):
    block_type: ClassVar[str] = "callout"
    kind: str = "NOTE"
    message: List["InlineElement"] = field(default_factory=list)


@dataclass
class ListItem:
    inline: List["InlineElement"] = field(default_factory=list)
    checked: bool | None = None
    items: List["ListItem"] = field(default_factory=list)


@dataclass
class ListBlock(Block):
    block_type: ClassVar[str] = "list"
    style: str  # "ordered" | "unordered" | "checklist"
    items: List[ListItem] = field(default_factory=list)


@dataclass
class TableBlock(Block):
    block_type: ClassVar[str] = "table"
    rows: List[List[str]] = field(default_factory=list)
    with_headings: bool = True


@dataclass
class CodeBlock(Block):
    block_type: ClassVar[str] = "code"
    language: str = ""
    code: str = ""


@dataclass
class DiagramBlock(Block):
    block_type: ClassVar[str] = "diagram"
    code: str = ""


@dataclass
class HorizontalRule(Block):
    """Horizontal rule / thematic break."""

    block_type: ClassVar[str] = "delimiter"


@dataclass
class RawBlock(Block):
    """Source text kept verbatim (HTML, almost-tables, indented content)."""

    block_type: ClassVar[str] = "raw"
    markdown: str = ""


@dataclass
class OpaqueBlock(Block):
    """Block of a kind this codec does not understand; payload kept as-is."""

    type_name: str = ""
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class InlineElement:
    """Base class for inline nodes."""


@dataclass
class InlineText(InlineElement):
    text: str


@dataclass
class InlineCode(InlineElement):
    code: str


@dataclass
class InlineBreak(InlineElement):
    """Line break inside a paragraph, heading or list item."""


@dataclass
class InlineSpan(InlineElement):
    children: List[InlineElement] = field(default_factory=list)


@dataclass
class InlineBold(InlineSpan):
    pass


@dataclass
class InlineItalic(InlineSpan):
    pass


@dataclass
class InlineStrike(InlineSpan):
    pass


@dataclass
class InlineLink(InlineSpan):
    href: str = ""


@dataclass
class InlineWikilink(InlineElement):
    target: str
    alias: str | None = None
