from __future__ import annotations

import logging
import re
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = frozenset({"http", "https", "mailto"})
HOST_REQUIRED_SCHEMES = frozenset({"http", "https"})

_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


def sanitize_href(raw: str | None) -> str | None:
    """Return the trimmed href when it is safe to link to, else ``None``.

    Only ``http``, ``https`` and ``mailto`` are accepted; web links also
    need a host. Relative paths are rejected because they have no scheme.
    """
    value = str(raw or "").strip()
    if not value:
        return None
    if _CONTROL_RE.search(value):
        logger.debug("Rejected href with control characters: %r", value)
        return None
    if not _SCHEME_RE.match(value):
        logger.debug("Rejected href without scheme: %r", value)
        return None

    try:
        parts = urlsplit(value)
        scheme = parts.scheme.lower()
        host = parts.hostname if scheme in HOST_REQUIRED_SCHEMES else None
    except ValueError:
        logger.debug("Rejected unparsable href: %r", value)
        return None

    if scheme not in ALLOWED_SCHEMES:
        logger.debug("Rejected href scheme %r", scheme)
        return None
    if scheme in HOST_REQUIRED_SCHEMES and not host:
        logger.debug("Rejected %s href without host: %r", scheme, value)
        return None
    return value
