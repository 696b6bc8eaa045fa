from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Tuple

import yaml

from .dialect import FRONTMATTER_DELIMITER
from .markdown_parser import parse_markdown
from .markdown_writer import render_markdown
from .model import Document
from .utils import normalize_newlines

logger = logging.getLogger(__name__)


def split_frontmatter(text: str) -> Tuple[Dict[str, Any], str, str]:
    """Return ``(metadata, body, raw_yaml)``; text without a readable envelope is all body."""
    text = normalize_newlines(text or "")
    opening = FRONTMATTER_DELIMITER + "\n"
    if not text.startswith(opening):
        return {}, text, ""

    lines = text[len(opening):].split("\n")
    for index, line in enumerate(lines):
        if line.strip() == FRONTMATTER_DELIMITER:
            raw = "\n".join(lines[:index])
            body = "\n".join(lines[index + 1:])
            break
    else:
        logger.debug("Front matter is not terminated; treating the whole note as body")
        return {}, text, ""

    try:
        data = yaml.safe_load(raw) if raw.strip() else {}
    except yaml.YAMLError as exc:
        logger.debug("Unreadable front matter left in the body: %s", exc)
        return {}, text, ""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        logger.debug("Front matter root is %s, not a mapping; left in the body", type(data).__name__)
        return {}, text, ""
    return data, body, raw


def join_frontmatter(metadata: Mapping[str, Any] | None, body: str) -> str:
    if not metadata:
        return body
    dump = yaml.safe_dump(dict(metadata), sort_keys=False, allow_unicode=True, default_flow_style=False).rstrip("\n")
    return f"{FRONTMATTER_DELIMITER}\n{dump}\n{FRONTMATTER_DELIMITER}\n{body}"


def parse_note(text: str) -> Document:
    metadata, body, _ = split_frontmatter(text)
    doc = parse_markdown(body)
    doc.metadata = metadata
    return doc


def render_note(doc: Document) -> str:
    return join_frontmatter(doc.metadata, render_markdown(doc))
