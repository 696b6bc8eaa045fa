from __future__ import annotations

# Fence language that turns a code fence into a diagram block.
DIAGRAM_LANGUAGE = "mermaid"

# One nesting level of a list.
LIST_INDENT = "  "
LIST_INDENT_WIDTH = len(LIST_INDENT)
TAB_WIDTH = 4

# Tables narrower than this are not recognized and are padded up to it on output.
MIN_TABLE_COLUMNS = 2
TABLE_SEPARATOR_CELL = "---"
CELL_LINE_BREAK = "<br>"

DEFAULT_HEADING_LEVEL = 2
MAX_HEADING_LEVEL = 6

DEFAULT_CALLOUT_KIND = "NOTE"

# Fence used when dumping a block kind the serializer does not know.
FALLBACK_FENCE_LANGUAGE = "json"

FRONTMATTER_DELIMITER = "---"

LIST_STYLES = ("ordered", "unordered", "checklist")
