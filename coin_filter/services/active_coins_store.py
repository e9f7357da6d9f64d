"""Read access to the active-coins JSON file produced by the external scanner job."""

from __future__ import annotations

import json
import os
from typing import Any

from coin_filter.schemas.market_data import ActiveCoinsFile
from coin_filter.utils.time import to_iso_z, utcnow


DATA_RELATIVE_PATH = os.path.join("public", "data", "active-coins.json")


def active_coins_path() -> str:
    """Resolved against the current working directory on every call."""
    return os.path.join(os.getcwd(), DATA_RELATIVE_PATH)


def empty_active_coins() -> dict[str, Any]:
    return ActiveCoinsFile(timestamp=to_iso_z(utcnow()), total=0, symbols=[]).model_dump()


def read_active_coins(path: str) -> Any:
    """
    Return the parsed file contents without validating them.
    Raises OSError / ValueError (json.JSONDecodeError, UnicodeDecodeError) on failure.
    """
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()
    return json.loads(content)
