"""
Request parsing helpers.
"""

import json
from typing import Any, Optional

from fastapi import Request


def _reject_constant(name: str):
    raise ValueError(f"Invalid JSON constant: {name}")


async def read_json_body(request: Request) -> Any:
    """
    Read the full request body and decode it as JSON.

    Returns None for an empty body. A body that is not valid JSON, including
    one using NaN or Infinity, is returned as raw
    text, so field presence checks downstream reject it.
    """
    raw = (await request.body()).decode("utf-8", errors="replace")
    if not raw:
        return None
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except ValueError:
        return raw


def parse_int(value: Optional[str], default: int) -> int:
    """Parse a query parameter as an integer, falling back to ``default``."""
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default
