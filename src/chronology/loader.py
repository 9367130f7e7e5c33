"""Load timed items from JSON exports.

Accepted layouts:

    [{"path": "a.md", "attribute": "created", "time": "2024-03-01T09:15:00"}, ...]

or the same list wrapped in an object:

    {"items": [...]}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from chronology.core.models import TimedItem

logger = logging.getLogger(__name__)

_items_adapter = TypeAdapter(list[TimedItem])


class ItemLoadError(Exception):
    """Raised when an item file cannot be read or does not hold valid items."""

    pass


def parse_items(data: object, source: str = "<data>") -> list[TimedItem]:
    """Validate already-decoded JSON data into TimedItems.

    Args:
        data: Decoded JSON, either a list of records or {"items": [...]}.
        source: Name used in error messages.

    Returns:
        Validated items in input order.

    Raises:
        ItemLoadError: If the layout is wrong or a record fails validation.
    """
    if isinstance(data, dict):
        if "items" not in data:
            raise ItemLoadError(f"{source}: expected a list or an object with an 'items' key")
        data = data["items"]

    if not isinstance(data, list):
        raise ItemLoadError(f"{source}: expected a list of items, got {type(data).__name__}")

    try:
        return _items_adapter.validate_python(data)
    except ValidationError as e:
        raise ItemLoadError(f"{source}: invalid item records: {e}") from e


def load_items(path: Path) -> list[TimedItem]:
    """Read and validate a JSON item file.

    Args:
        path: Path to the JSON file.

    Returns:
        Validated items in file order.

    Raises:
        ItemLoadError: If the file cannot be read, is not JSON, or holds invalid items.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ItemLoadError(f"Cannot read {path}: {e}") from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ItemLoadError(f"{path} is not valid JSON: {e}") from e

    items = parse_items(data, source=str(path))
    logger.info(f"Loaded {len(items)} items from {path}")
    return items
