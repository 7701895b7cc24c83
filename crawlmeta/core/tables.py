from __future__ import annotations

import re

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class TableNames:
    """Table names known to the package."""

    METADATA = "metadata"


def quote_identifier(name: str) -> str:
    """Validate *name* as a plain SQL identifier and return it double-quoted.

    SQLite cannot bind identifiers as parameters, so table names end up in the
    statement text.  Only ``[A-Za-z_][A-Za-z0-9_]*`` is accepted.
    """
    if not isinstance(name, str) or not _IDENTIFIER.fullmatch(name):
        raise ValueError(f"Invalid table name: {name!r}")
    return f'"{name}"'
