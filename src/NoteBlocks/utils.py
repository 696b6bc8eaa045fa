from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

_TRAILING_WS_RE = re.compile(r"[ \t]+$", re.MULTILINE)


def configure_logging(verbose: bool = False) -> None:
    """Configure a simple console logger."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(message)s",
    )


def resolve_output_path(input_path: Path, output: Optional[str], suffix: str) -> Path | None:
    """Where to write a command's result; ``None`` means standard output."""
    if not output:
        return None
    out_path = Path(output)
    if out_path.is_dir():
        out_path = out_path / f"{input_path.stem}{suffix}"
    return out_path


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def normalize_multiline(text: str) -> str:
    """Unify line endings, drop trailing whitespace and surrounding blank lines."""
    text = _TRAILING_WS_RE.sub("", normalize_newlines(text))
    return text.strip("\n")
