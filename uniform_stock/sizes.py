"""
sizes.py

Ordering of size labels for charts and lists.

Two label domains exist in the stock data:
    - clothing labels (XXS .. 5XL), ordered by settings.CLOTHING_SIZE_ORDER
    - numeric labels (footwear), ordered by their numeric value

Public API:
    order_by_size_domain(entries, domain_hint=None, in_place=False) -> list
    sort_sizes(sizes, in_place=False) -> list[str]
    sort_numeric_sizes(sizes, in_place=False) -> list[str]
    is_numeric_size_type(item_type) -> bool
    sizes_for_item_type(item_type) -> list[str]

None of these raise on odd input; unparsable sizes fall back to 0 (numeric)
or to the end of the list (clothing).
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from typing import Any, List, Optional

from . import settings

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _size_of(entry: Any) -> Any:
    if isinstance(entry, Mapping):
        return entry.get("size")
    return getattr(entry, "size", None)


def _to_number(size: Any) -> float:
    """Full-string numeric parse; anything else is 0."""
    if size is None:
        return 0
    try:
        number = float(str(size).strip())
    except ValueError:
        return 0
    return 0 if math.isnan(number) else number


def _is_number(size: Any) -> bool:
    text = str(size).strip()
    if not text:
        return False
    try:
        return not math.isnan(float(text))
    except ValueError:
        return False


def _to_leading_int(size: Any) -> int:
    """Leading-integer parse ("12A" -> 12); no leading digits is 0."""
    m = _LEADING_INT.match(str(size)) if size is not None else None
    return int(m.group(1)) if m else 0


def _clothing_index(entry: Any) -> int:
    label = str(_size_of(entry) or settings.NO_SIZE).upper().strip()
    try:
        return settings.CLOTHING_SIZE_ORDER.index(label)
    except ValueError:
        # Unknown labels share one slot after every known one; the stable
        # sort keeps their input order.
        return len(settings.CLOTHING_SIZE_ORDER)


def _numeric_value(entry: Any) -> float:
    return _to_number(_size_of(entry))


def _working_list(entries: Any, in_place: bool) -> List[Any]:
    """The caller's list when sorting in place, otherwise a private copy."""
    if entries is None:
        return []
    return entries if in_place and isinstance(entries, list) else list(entries)


def order_by_size_domain(
    entries: Any, domain_hint: Optional[str] = None, in_place: bool = False
) -> List[Any]:
    """
    Orders graph entries (dicts or objects with a `size`) by their size label.

    The domain is picked from the item type passed as `domain_hint`:
        1. contains "boot"             -> numeric ascending
        2. contains "baju"/"uniform"   -> clothing order
        3. anything else / no hint     -> numeric if the first entry's size is
                                          a number, otherwise clothing order

    Args:
        entries: Sequence of entries. None is treated as empty.
        domain_hint: Item type string, matched case-insensitively.
        in_place: Sort the caller's list instead of returning a copy.
            Only honoured when `entries` is a list.

    Returns:
        The ordered entries. The sort is stable.
    """
    items = _working_list(entries, in_place)
    hint = str(domain_hint).lower() if domain_hint else ""

    if "boot" in hint:
        domain = "numeric"
    elif "baju" in hint or "uniform" in hint:
        domain = "clothing"
    elif items and _is_number(_size_of(items[0]) or settings.NO_SIZE):
        domain = "numeric"
    else:
        domain = "clothing"

    logger.debug(f"Ordering {len(items)} entries by {domain} size (hint={domain_hint!r})")
    items.sort(key=_numeric_value if domain == "numeric" else _clothing_index)
    return items


def sort_sizes(sizes: Any, in_place: bool = False) -> List[str]:
    """Orders plain size labels XXS -> 5XL. Unknown labels go last, in input order."""
    items = _working_list(sizes, in_place)
    items.sort(key=lambda size: settings.SIZE_RANK.get(str(size).upper(), settings.UNKNOWN_SIZE_RANK))
    return items


def sort_numeric_sizes(sizes: Any, in_place: bool = False) -> List[str]:
    """Orders numeric size labels (boots, shoes) by their leading integer."""
    items = _working_list(sizes, in_place)
    items.sort(key=_to_leading_int)
    return items


def is_numeric_size_type(item_type: Optional[str]) -> bool:
    """True when the item type uses numeric sizes (boots, shoes, PVC shoes)."""
    if not item_type:
        return False
    lower = str(item_type).lower()
    return any(keyword in lower for keyword in settings.NUMERIC_SIZE_KEYWORDS)


def sizes_for_item_type(item_type: Optional[str]) -> List[str]:
    """
    Returns the size labels stocked for an item type.

    Accessories have no sizes. Types that match no rule also get an empty list.
    """
    if not item_type:
        return []
    lower = str(item_type).lower()

    if any(keyword in lower for keyword in settings.ACCESSORY_KEYWORDS):
        return []
    if any(keyword in lower for keyword in settings.CLOTHING_KEYWORDS):
        return list(settings.CLOTHING_SIZES)
    if "shoe" in lower:
        return list(settings.SHOE_SIZES)
    if "boot" in lower:
        return list(settings.BOOT_SIZES)
    if "beret" in lower:
        return list(settings.BERET_SIZES)
    return []
