"""
aggregation.py

Stock counting and status classification for dashboard cards and reports.

Public API:
    aggregate_by_category(records, per_record_low_stock=False) -> dict[str, CategoryAggregate]
    classify_global_status(items) -> StatusTally
    stock_status(quantity) -> StockStatus
    tally_by_category(records) -> dict[str, StatusTally]
    tally_by_item_type(records) -> dict[str, ItemTypeTally]
    inventory_by_size(records) -> dict[str, dict[str, dict[str, SizeCell]]]
    group_by_type(records) -> dict[str, list]

Two threshold rules live here on purpose and must stay separate:
    - category aggregates treat quantity <= 10 as low (zero included)
    - per-item tallies use > 10 in stock, 1..10 low, <= 0 out of stock

Records may be raw API dicts, objects, or StockRecord models; they are
normalized through StockRecord and nothing here raises.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List

from . import settings
from .schemas import (
    CategoryAggregate,
    ItemTypeTally,
    SizeCell,
    StatusTally,
    StockRecord,
    StockStatus,
    normalize_records,
)

logger = logging.getLogger(__name__)


def _category_status(distinct_items: int, low_stock: int) -> StockStatus:
    if distinct_items == 0:
        return StockStatus.NO_ITEMS
    if low_stock == distinct_items:
        return StockStatus.OUT_OF_STOCK
    if 0 < low_stock <= distinct_items / 2:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def aggregate_by_category(
    records: Iterable[Any] | None, per_record_low_stock: bool = False
) -> Dict[str, CategoryAggregate]:
    """
    Rolls inventory lines up into one aggregate per category.

    Items are identified by "<type>_<size>" or, for unsized items, by type.
    Quantities of repeated keys add up in `total_units` while the key is
    counted once in `distinct_item_count`.

    Args:
        records: Inventory lines. None or empty gives an empty mapping.
        per_record_low_stock: Count every low-quantity line instead of every
            low-quantity item key. This is how the old dashboard counted and
            can push `low_stock_count` above `distinct_item_count`, in which
            case the category falls through to "In Stock". Pass True to
            reproduce the numbers that dashboard showed; the default counts
            each item key once so low stock never exceeds distinct items.

    Returns:
        Category name -> CategoryAggregate, in first-seen category order.
    """
    items: Dict[str, set] = {}
    low_items: Dict[str, set] = {}
    low_sightings: Dict[str, int] = {}
    units: Dict[str, int] = {}

    for record in normalize_records(records):
        category = record.category
        if category not in items:
            items[category] = set()
            low_items[category] = set()
            low_sightings[category] = 0
            units[category] = 0

        key = record.item_key
        items[category].add(key)
        units[category] += record.quantity
        if record.quantity <= settings.LOW_STOCK_THRESHOLD:
            low_items[category].add(key)
            low_sightings[category] += 1

    result: Dict[str, CategoryAggregate] = {}
    for category, keys in items.items():
        low_stock = low_sightings[category] if per_record_low_stock else len(low_items[category])
        result[category] = CategoryAggregate(
            distinct_item_count=len(keys),
            total_units=units[category],
            low_stock_count=low_stock,
            status=_category_status(len(keys), low_stock),
        )

    logger.debug(f"Aggregated {len(result)} categories")
    return result


def stock_status(quantity: Any) -> StockStatus:
    """Per-item status: > 10 in stock, > 0 low stock, otherwise out of stock."""
    record = StockRecord(quantity=quantity)
    if record.quantity > settings.LOW_STOCK_THRESHOLD:
        return StockStatus.IN_STOCK
    if record.quantity > 0:
        return StockStatus.LOW_STOCK
    return StockStatus.OUT_OF_STOCK


def _bump(tally: StatusTally, status: StockStatus) -> None:
    if status is StockStatus.IN_STOCK:
        tally.in_stock += 1
    elif status is StockStatus.LOW_STOCK:
        tally.low_stock += 1
    else:
        tally.out_of_stock += 1


def classify_global_status(items: Iterable[Any] | None) -> StatusTally:
    """
    Tallies every item into in stock / low stock / out of stock.

    One count per input item, no de-duplication. Use
    `.model_dump(by_alias=True)` for the {"inStock", "lowStock", "outOfStock"} shape.
    """
    tally = StatusTally()
    for record in normalize_records(items):
        _bump(tally, stock_status(record.quantity))
    return tally


def tally_by_category(records: Iterable[Any] | None) -> Dict[str, StatusTally]:
    """Same per-item tally as classify_global_status, split by category."""
    result: Dict[str, StatusTally] = {}
    for record in normalize_records(records):
        tally = result.setdefault(record.category, StatusTally())
        _bump(tally, stock_status(record.quantity))
    return result


def tally_by_item_type(records: Iterable[Any] | None) -> Dict[str, ItemTypeTally]:
    """Per-item tally keyed by "category - type", with the unit total per key."""
    result: Dict[str, ItemTypeTally] = {}
    for record in normalize_records(records):
        tally = result.setdefault(f"{record.category} - {record.type}", ItemTypeTally())
        tally.total += record.quantity
        _bump(tally, stock_status(record.quantity))
    return result


def inventory_by_size(
    records: Iterable[Any] | None,
) -> Dict[str, Dict[str, Dict[str, SizeCell]]]:
    """
    Builds category -> type -> size -> SizeCell.

    Unsized lines are filed under "N/A". A later line for the same cell
    replaces the earlier one.
    """
    result: Dict[str, Dict[str, Dict[str, SizeCell]]] = {}
    for record in normalize_records(records):
        size = record.size or settings.NO_SIZE
        by_type = result.setdefault(record.category, {}).setdefault(record.type, {})
        by_type[size] = SizeCell(quantity=record.quantity, status=stock_status(record.quantity))
    return result


def _group_fields(record: Any) -> tuple:
    if isinstance(record, Mapping):
        return record.get("category"), record.get("type")
    return getattr(record, "category", None), getattr(record, "type", None)


def group_by_type(records: Iterable[Any] | None) -> Dict[str, List[Any]]:
    """
    Groups records under "category - type" keys.

    The records themselves are returned untouched (not normalized), so this
    works on recommendation rows as well as inventory lines. Group order is
    the order of first occurrence; records keep their input order.
    """
    grouped: Dict[str, List[Any]] = {}
    for record in records or []:
        category, item_type = _group_fields(record)
        grouped.setdefault(f"{category} - {item_type}", []).append(record)
    return grouped
