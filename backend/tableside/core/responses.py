"""Envelope for endpoints that return bare lists of labels.

Department names and inventory categories come back as
``{"items": [...], "total": n}``; row listings return the rows directly.
"""

from typing import Iterable, Optional


def list_response(items: Iterable, total: Optional[int] = None) -> dict:
    values = list(items)
    return {"items": values, "total": len(values) if total is None else total}
