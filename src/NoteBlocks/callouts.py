from __future__ import annotations

import re

from .dialect import DEFAULT_CALLOUT_KIND

CALLOUT_KINDS = (
    "NOTE",
    "ABSTRACT",
    "INFO",
    "TIP",
    "SUCCESS",
    "QUESTION",
    "WARNING",
    "FAILURE",
    "DANGER",
    "BUG",
    "EXAMPLE",
    "QUOTE",
)

ALIAS_TO_KIND = {
    **{kind: kind for kind in CALLOUT_KINDS},
    "SUMMARY": "ABSTRACT",
    "TLDR": "ABSTRACT",
    "TODO": "INFO",
    "HINT": "TIP",
    "IMPORTANT": "TIP",
    "CHECK": "SUCCESS",
    "DONE": "SUCCESS",
    "HELP": "QUESTION",
    "FAQ": "QUESTION",
    "CAUTION": "WARNING",
    "ATTENTION": "WARNING",
    "FAIL": "FAILURE",
    "MISSING": "FAILURE",
    "ERROR": "DANGER",
    "CITE": "QUOTE",
}

_TOKEN_STRIP_RE = re.compile(r"[^A-Z0-9_-]+")


def normalize_callout_kind(value: str | None) -> str:
    """Map a marker token such as ``caution`` onto its canonical kind."""
    token = _TOKEN_STRIP_RE.sub("", str(value or "").strip().upper())
    return ALIAS_TO_KIND.get(token, DEFAULT_CALLOUT_KIND)


def callout_kind_label(kind: str) -> str:
    canonical = normalize_callout_kind(kind)
    return canonical[0] + canonical[1:].lower()
