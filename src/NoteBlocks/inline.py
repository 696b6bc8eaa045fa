"""Inline markdown <-> rich-text node tree.

Parsing uses markdown-it's inline tokenizer (commonmark rules plus
strikethrough) with an extra rule for ``[[target|alias]]`` references.
Image, autolink, raw HTML and entity rules are switched off so that
``!``, ``<`` and ``&`` stay literal text in this dialect.
"""

from __future__ import annotations

import logging
import re
import string
from typing import Iterable, List, Sequence
from urllib.parse import quote

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from markdown_it.parser_inline import ParserInline
from markdown_it.rules_inline import StateInline
from markdown_it.rules_inline.state_inline import Scanned
from markdown_it.token import Token

from .hrefs import sanitize_href
from .model import (
    InlineBold,
    InlineBreak,
    InlineCode,
    InlineElement,
    InlineItalic,
    InlineLink,
    InlineSpan,
    InlineStrike,
    InlineText,
    InlineWikilink,
)
from .wikilinks import default_label

logger = logging.getLogger(__name__)

WIKILINK_RE = re.compile(r"\[\[([^\]|\n]+)(?:\|([^\]\n]+))?\]\]")

_PUNCTUATION = frozenset(string.punctuation)
_BACKTICK_RUN_RE = re.compile(r"`+")
_DESTINATION_WRAP_RE = re.compile(r"[\s<>]")
_WIKILINK_TARGET_BREAK_RE = re.compile(r"[\]|\n]")

_SPAN_TYPES = {
    "strong": InlineBold,
    "em": InlineItalic,
    "s": InlineStrike,
}


def _wikilink_rule(state: StateInline, silent: bool) -> bool:
    if not state.src.startswith("[[", state.pos):
        return False
    match = WIKILINK_RE.match(state.src, state.pos, state.posMax)
    if match is None or not match.group(1).strip():
        return False
    if not silent:
        token = state.push("wikilink", "", 0)
        token.markup = match.group(0)
        token.meta = {
            "target": match.group(1).strip(),
            "alias": (match.group(2) or "").strip(),
        }
    state.pos = match.end()
    return True


class DialectInlineState(StateInline):
    """Inline state whose emphasis and strike delimiters only need non-whitespace on the inner side."""

    def scanDelims(self, start: int, canSplitWord: bool) -> Scanned:
        marker = self.src[start]
        pos = start
        while pos < self.posMax and self.src[pos] == marker:
            pos += 1
        last_char = self.src[start - 1] if start > 0 else " "
        next_char = self.src[pos] if pos < self.posMax else " "

        can_open = not next_char.isspace()
        can_close = not last_char.isspace()
        if not canSplitWord and last_char.isalnum() and next_char.isalnum():
            # `_` inside a word (snake_case) is never a delimiter
            can_open = can_close = False
        return Scanned(can_open, can_close, pos - start)


class DialectInlineParser(ParserInline):
    def parse(self, src, md, env, tokens):
        state = DialectInlineState(src, md, env, tokens)
        self.tokenize(state)
        for rule in self.ruler2.getRules(""):
            rule(state)
        return state.tokens


def _validate_link(url: str) -> bool:
    return sanitize_href(url) is not None


def _keep_link(url: str) -> str:
    return url


def build_inline_parser() -> MarkdownIt:
    md = MarkdownIt("commonmark", {"html": False})
    md.enable("strikethrough")
    md.disable(["image", "autolink", "html_inline", "entity"])
    dialect_inline = DialectInlineParser()
    dialect_inline.ruler, dialect_inline.ruler2 = md.inline.ruler, md.inline.ruler2
    md.inline = dialect_inline
    md.inline.ruler.before("link", "wikilink", _wikilink_rule)
    # Hrefs are stored exactly as written; unsafe ones never become link tokens.
    md.normalizeLink = _keep_link
    md.validateLink = _validate_link
    return md


_PARSER = build_inline_parser()


def parse_inline(text: str) -> List[InlineElement]:
    """Parse one run of inline markdown (may span lines) into nodes."""
    if not text:
        return []
    tokens = _PARSER.parseInline(text)
    if not tokens:
        return []
    return _tokens_to_nodes(tokens[0].children or [])


def _tokens_to_nodes(tokens: Sequence[Token]) -> List[InlineElement]:
    root: List[InlineElement] = []
    stack: List[List[InlineElement]] = [root]
    openers: List[Token] = []

    for tok in tokens:
        if tok.type in ("text", "text_special"):
            _append_text(stack[-1], tok.content)
        elif tok.type in ("softbreak", "hardbreak"):
            stack[-1].append(InlineBreak())
        elif tok.type == "code_inline":
            stack[-1].append(InlineCode(tok.content))
        elif tok.type == "wikilink":
            alias = tok.meta.get("alias") or None
            stack[-1].append(InlineWikilink(target=tok.meta["target"], alias=alias))
        elif tok.nesting == 1:
            openers.append(tok)
            stack.append([])
        elif tok.nesting == -1 and openers:
            opener = openers.pop()
            children = stack.pop()
            for node in _close_span(opener, children):
                if isinstance(node, InlineText):
                    _append_text(stack[-1], node.text)
                else:
                    stack[-1].append(node)

    # Unbalanced openers cannot come out of markdown-it, but keep their text.
    while len(stack) > 1:
        children = stack.pop()
        stack[-1].extend(children)
    return root


def _close_span(opener: Token, children: List[InlineElement]) -> List[InlineElement]:
    kind = opener.type[: -len("_open")]
    if kind in _SPAN_TYPES:
        return [_SPAN_TYPES[kind](children=children)]
    if kind == "link":
        href = str(opener.attrGet("href") or "")
        safe = sanitize_href(href)
        if safe:
            return [InlineLink(children=children, href=safe)]
        logger.debug("Keeping link with rejected href %r as text", href)
        return [InlineText("["), *children, InlineText(f"]({href})")]
    return children


def _append_text(nodes: List[InlineElement], text: str) -> None:
    if not text:
        return
    if nodes and isinstance(nodes[-1], InlineText):
        nodes[-1] = InlineText(nodes[-1].text + text)
    else:
        nodes.append(InlineText(text))


# -- rich text -> markdown -------------------------------------------------


def inline_to_markdown(nodes: Iterable[InlineElement], single_line: bool = False) -> str:
    """Rebuild inline markdown; ``single_line`` turns breaks into spaces."""
    parts: list[str] = []
    for node in nodes:
        parts.append(_node_to_markdown(node, single_line))
    return "".join(parts)


def _node_to_markdown(node: InlineElement, single_line: bool) -> str:
    if isinstance(node, InlineText):
        text = node.text.replace("\n", " ") if single_line else node.text
        return escape_markdown_text(text)
    if isinstance(node, InlineBreak):
        return " " if single_line else "\n"
    if isinstance(node, InlineCode):
        return format_code_span(node.code)
    if isinstance(node, InlineWikilink):
        return format_wikilink(node.target, node.alias)
    if isinstance(node, InlineLink):
        label = inline_to_markdown(node.children, single_line)
        return f"[{label}]({format_destination(node.href)})"
    if isinstance(node, InlineBold):
        return wrap_delimiters("**", inline_to_markdown(node.children, single_line))
    if isinstance(node, InlineItalic):
        return wrap_delimiters("*", inline_to_markdown(node.children, single_line))
    if isinstance(node, InlineStrike):
        return wrap_delimiters("~~", inline_to_markdown(node.children, single_line))
    if isinstance(node, InlineSpan):
        return inline_to_markdown(node.children, single_line)
    return ""


def wrap_delimiters(marker: str, inner: str) -> str:
    core = inner.strip()
    if not core:
        return inner
    # Delimiters must touch non-whitespace to be recognized again.
    lead = inner[: len(inner) - len(inner.lstrip())]
    trail = inner[len(inner.rstrip()) :]
    return f"{lead}{marker}{core}{marker}{trail}"


def escape_markdown_text(text: str) -> str:
    """Backslash-escape only the characters that would otherwise be markup."""
    out: list[str] = []
    last = len(text) - 1
    for idx, ch in enumerate(text):
        prev = text[idx - 1] if idx > 0 else ""
        nxt = text[idx + 1] if idx < last else ""
        if ch == "\\":
            out.append("\\\\" if (not nxt or nxt in _PUNCTUATION) else ch)
        elif ch in "`[]":
            out.append("\\" + ch)
        elif ch in "*_":
            out.append("\\" + ch if _could_delimit(ch, prev, nxt) else ch)
        elif ch == "~":
            out.append("\\~" if "~" in (prev, nxt) else ch)
        else:
            out.append(ch)
    return "".join(out)


def _could_delimit(ch: str, prev: str, nxt: str) -> bool:
    prev_space = not prev or prev.isspace()
    next_space = not nxt or nxt.isspace()
    if prev_space and next_space:
        return False
    if ch == "_" and prev.isalnum() and nxt.isalnum():
        return False
    return True


def format_code_span(code: str) -> str:
    if not code:
        return ""
    longest = max((len(run) for run in _BACKTICK_RUN_RE.findall(code)), default=0)
    fence = "`" * (longest + 1)
    padded = code.startswith("`") or code.endswith("`")
    if code.startswith(" ") and code.endswith(" ") and code.strip(" "):
        padded = True
    if padded:
        code = f" {code} "
    return f"{fence}{code}{fence}"


def format_destination(href: str) -> str:
    if _DESTINATION_WRAP_RE.search(href) or href.count("(") != href.count(")"):
        return "<" + href.replace("<", "%3C").replace(">", "%3E") + ">"
    return href


def format_wikilink(target: str, alias: str | None = None) -> str:
    """``[[target|alias]]``, or the escaped label when the target cannot live inside brackets."""
    target = target.strip()
    alias = (alias or "").replace("]", "").replace("\n", " ").strip()
    if not target or _WIKILINK_TARGET_BREAK_RE.search(target):
        logger.debug("Wikilink target %r cannot be written as a reference, keeping its label", target)
        return escape_markdown_text(alias or target)
    if alias and alias != default_label(target):
        return f"[[{target}|{alias}]]"
    return f"[[{target}]]"


# -- rich text -> editor markup / plain text -------------------------------


def inline_to_html(nodes: Iterable[InlineElement]) -> str:
    """Lightweight markup for the block editor; all text is HTML-escaped."""
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, InlineText):
            parts.append(escapeHtml(node.text).replace("\n", "<br>"))
        elif isinstance(node, InlineBreak):
            parts.append("<br>")
        elif isinstance(node, InlineCode):
            parts.append(f'<code class="inline-code">{escapeHtml(node.code)}</code>')
        elif isinstance(node, InlineWikilink):
            label = node.alias or default_label(node.target)
            parts.append(
                f'<a href="wikilink:{escapeHtml(_quote_target(node.target))}" '
                f'data-wikilink-target="{escapeHtml(node.target)}">{escapeHtml(label)}</a>'
            )
        elif isinstance(node, InlineLink):
            href = sanitize_href(node.href)
            if href is None:
                parts.append(inline_to_html(node.children))
                continue
            parts.append(
                f'<a href="{escapeHtml(href)}" target="_blank" rel="noopener noreferrer">'
                f"{inline_to_html(node.children)}</a>"
            )
        elif isinstance(node, InlineBold):
            parts.append(f"<strong>{inline_to_html(node.children)}</strong>")
        elif isinstance(node, InlineItalic):
            parts.append(f"<em>{inline_to_html(node.children)}</em>")
        elif isinstance(node, InlineStrike):
            parts.append(f"<s>{inline_to_html(node.children)}</s>")
        elif isinstance(node, InlineSpan):
            parts.append(inline_to_html(node.children))
    return "".join(parts)


def _quote_target(target: str) -> str:
    return quote(target, safe="")


def inline_to_text(nodes: Iterable[InlineElement]) -> str:
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, InlineText):
            parts.append(node.text)
        elif isinstance(node, InlineBreak):
            parts.append("\n")
        elif isinstance(node, InlineCode):
            parts.append(node.code)
        elif isinstance(node, InlineWikilink):
            parts.append(node.alias or default_label(node.target))
        elif isinstance(node, InlineSpan):
            parts.append(inline_to_text(node.children))
    return "".join(parts)


def iter_wikilinks(nodes: Iterable[InlineElement]) -> Iterable[InlineWikilink]:
    for node in nodes:
        if isinstance(node, InlineWikilink):
            yield node
        elif isinstance(node, InlineSpan):
            yield from iter_wikilinks(node.children)
