"""Central Pytest Fixtures for Chronology.

This module provides reusable timed items, taxonomies and temporary item
files across all test modules.

Fixtures included:
- Core data: make_item, day_items, week_items
- Taxonomies: small_taxonomy (slots "00".."04", clusters "0"/"10"/"20")
- Files: items_file
- Isolation: logging and config cache reset (autouse)
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable

import pytest

from chronology.config import reset_config
from chronology.core.models import DateAttribute, TimedItem
from chronology.utils.logging import PACKAGE_NAME

# =============================================================================
# Helper Functions
# =============================================================================


def create_item(
    path: str,
    time: datetime,
    attribute: DateAttribute = DateAttribute.MODIFIED,
) -> TimedItem:
    """Helper to build a TimedItem with a default attribute."""
    return TimedItem(path=path, attribute=attribute, time=time)


def write_items_json(path: Path, items: list[TimedItem], wrap: bool = False) -> Path:
    """Helper to write items as a JSON export.

    Args:
        path: Where to save the JSON.
        items: Items to serialize.
        wrap: Wrap the list in {"items": [...]}.

    Returns:
        Path to the created file.
    """
    records = [
        {"path": item.path, "attribute": item.attribute.value, "time": item.time.isoformat()}
        for item in items
    ]
    data = {"items": records} if wrap else records
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolate_logging_and_config():
    """Undo CLI logging setup and config caching between tests."""
    reset_config()
    yield
    reset_config()
    package_logger = logging.getLogger(PACKAGE_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


# =============================================================================
# Core Data Fixtures
# =============================================================================


@pytest.fixture
def make_item() -> Callable[..., TimedItem]:
    """Factory fixture for TimedItems."""
    return create_item


@pytest.fixture
def day_items() -> list[TimedItem]:
    """Notes from Friday 2024-03-01 between 09:05 and 11:25.

    - 09:05 and 09:07 share the 09 / "0" bucket
    - 10:xx has nothing (internal gap)
    - 11:25 lands in the 11 / "20" bucket
    - 11:45 is outside the default minute clusters
    """
    return [
        create_item("daily/2024-03-01.md", datetime(2024, 3, 1, 9, 5), DateAttribute.CREATED),
        create_item("projects/roadmap.md", datetime(2024, 3, 1, 9, 7)),
        create_item("inbox/call.md", datetime(2024, 3, 1, 9, 14)),
        create_item("daily/2024-03-01.md", datetime(2024, 3, 1, 11, 25)),
        create_item("inbox/late.md", datetime(2024, 3, 1, 11, 45)),
    ]


@pytest.fixture
def week_items() -> list[TimedItem]:
    """Notes across the week of Sunday 2024-03-03.

    - Monday 08:30 and 23:10
    - Wednesday 13:00
    """
    return [
        create_item("work/standup.md", datetime(2024, 3, 4, 8, 30), DateAttribute.CREATED),
        create_item("journal/monday.md", datetime(2024, 3, 4, 23, 10)),
        create_item("work/review.md", datetime(2024, 3, 6, 13, 0)),
    ]


@pytest.fixture
def small_taxonomy() -> dict:
    """Slots "00".."04" keyed by item.time hour, clusters "0"/"10"/"20" by minute."""
    return {
        "slot_labels": ["00", "01", "02", "03", "04"],
        "slot_key": lambda item: item.time.strftime("%H"),
        "cluster_labels": ["0", "10", "20"],
        "cluster_key": lambda item: str(item.time.minute // 10 * 10),
    }


# =============================================================================
# File Fixtures
# =============================================================================


@pytest.fixture
def items_file(tmp_path: Path, day_items: list[TimedItem]) -> Path:
    """JSON export of day_items."""
    return write_items_json(tmp_path / "items.json", day_items)
