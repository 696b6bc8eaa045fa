"""Helpers for ``[[target|alias]]`` linked references."""

from __future__ import annotations

import re
from dataclasses import dataclass

_MARKDOWN_EXT_RE = re.compile(r"\.(md|markdown)$", re.IGNORECASE)


@dataclass(frozen=True)
class WikilinkAnchor:
    heading: str | None = None
    block_id: str | None = None


@dataclass(frozen=True)
class WikilinkTarget:
    note_path: str
    anchor: WikilinkAnchor | None = None


def parse_wikilink_target(raw: str) -> WikilinkTarget:
    # Handles: path | path#Heading | path#^block | #Heading (anchor-only)
    value = str(raw or "").strip()
    if "#" not in value:
        return WikilinkTarget(note_path=value)

    note_path, fragment = value.split("#", 1)
    note_path = note_path.strip()
    fragment = fragment.strip()
    if not fragment:
        return WikilinkTarget(note_path=note_path)
    if fragment.startswith("^"):
        block_id = normalize_block_id(fragment)
        return WikilinkTarget(
            note_path=note_path,
            anchor=WikilinkAnchor(block_id=block_id) if block_id else None,
        )
    return WikilinkTarget(note_path=note_path, anchor=WikilinkAnchor(heading=fragment))


def default_label(target: str) -> str:
    """Label shown for a reference written without an explicit alias."""
    value = str(target or "").strip()
    parsed = parse_wikilink_target(value)
    if parsed.anchor and parsed.anchor.heading and not parsed.note_path:
        return parsed.anchor.heading
    return value


def normalize_block_id(value: str) -> str:
    return value.strip().lstrip("^").lower()


def normalize_heading_anchor(value: str) -> str:
    return re.sub(r"\s+", " ", value.strip().lower())


def slugify_heading(value: str) -> str:
    slug = normalize_heading_anchor(value)
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def infer_deep_alias(target: str) -> str | None:
    """Last path segment (without extension) of a nested note path."""
    note_path = parse_wikilink_target(target).note_path.replace("\\", "/").strip()
    if "/" not in note_path:
        return None
    segments = [segment for segment in note_path.split("/") if segment]
    if not segments:
        return None
    alias = _MARKDOWN_EXT_RE.sub("", segments[-1].strip()).strip()
    return alias or None


def build_wikilink_token(target: str, alias: str | None = None) -> str:
    """Token inserted by link-picking UI; deep paths get a readable alias."""
    target = str(target or "").strip()
    alias = str(alias or "").strip()
    if not target:
        return "[[]]"
    if alias:
        return f"[[{target}|{alias}]]"
    inferred = infer_deep_alias(target)
    if inferred and inferred != target:
        return f"[[{target}|{inferred}]]"
    return f"[[{target}]]"
