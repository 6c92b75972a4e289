import math
from collections.abc import Mapping
from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


def _first_present(raw: Mapping, *keys: str) -> Any:
    """Returns the first value under `keys` that is neither None nor an empty string."""
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def to_quantity(value: Any) -> int:
    """Coerces an API quantity to int. Anything unusable becomes 0."""
    if value is None:
        return 0
    # Exact ints skip the float round-trip (precision, OverflowError).
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if math.isnan(number) or math.isinf(number):
        return 0
    return int(number)


def _as_mapping(data: Any) -> Mapping:
    if isinstance(data, Mapping):
        return data
    if isinstance(data, BaseModel):
        return data.model_dump(by_alias=True)
    # Plain objects (e.g. SimpleNamespace rows) are read through their attributes.
    return getattr(data, "__dict__", None) or {}


class StockStatus(str, Enum):
    IN_STOCK = "In Stock"
    LOW_STOCK = "Low Stock"
    OUT_OF_STOCK = "Out of Stock"
    NO_ITEMS = "No Items"


class StockRecord(BaseModel):
    """
    The single internal shape of one inventory line.

    Backend payloads drift between screens (`name` instead of `type`,
    `currentStock` instead of `quantity`, empty strings for missing sizes).
    All of that is folded in here so the aggregation code only ever sees
    this model. Validation never fails: every field has a default.
    """

    model_config = ConfigDict(populate_by_name=True)

    category: str = "Unknown"
    type: str = "Unknown"
    size: Optional[str] = None
    quantity: int = 0

    @model_validator(mode="before")
    @classmethod
    def _normalize_fields(cls, data: Any) -> dict:
        raw = _as_mapping(data)
        category = _first_present(raw, "category")
        item_type = _first_present(raw, "type", "name")
        size = _first_present(raw, "size")
        quantity = _first_present(raw, "quantity", "currentStock", "currentQuantity")
        return {
            "category": str(category) if category is not None else "Unknown",
            "type": str(item_type) if item_type is not None else "Unknown",
            "size": str(size) if size is not None else None,
            "quantity": to_quantity(quantity),
        }

    @property
    def has_size(self) -> bool:
        return self.size is not None and self.size != "N/A"

    @property
    def item_key(self) -> str:
        """Identity used when counting distinct stock variants."""
        return f"{self.type}_{self.size}" if self.has_size else self.type


def normalize_records(raw_records: Any) -> list[StockRecord]:
    """Maps a raw API list (or None) onto StockRecord models."""
    if not raw_records:
        return []
    return [
        record if isinstance(record, StockRecord) else StockRecord.model_validate(record)
        for record in raw_records
    ]


class CategoryAggregate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    distinct_item_count: int = Field(default=0, ge=0, alias="distinctItemCount")
    total_units: int = Field(default=0, alias="totalUnits")
    low_stock_count: int = Field(default=0, ge=0, alias="lowStockCount")
    status: StockStatus = Field(default=StockStatus.NO_ITEMS)


class StatusTally(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    in_stock: int = Field(default=0, ge=0, alias="inStock")
    low_stock: int = Field(default=0, ge=0, alias="lowStock")
    out_of_stock: int = Field(default=0, ge=0, alias="outOfStock")


class ItemTypeTally(StatusTally):
    total: int = 0


class SizeCell(BaseModel):
    quantity: int = 0
    status: StockStatus


class GraphDataItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    size: str = "N/A"
    recommended_stock: float = Field(default=0, alias="recommendedStock")
    forecasted_demand: Optional[float] = Field(default=None, alias="forecastedDemand")


class RecommendedStockItem(BaseModel):
    """One row of the recommended-stock endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    category: str
    type: str
    size: Optional[str] = None
    recommended_stock: float = Field(default=0, alias="recommendedStock")
    current_stock: Optional[int] = Field(default=None, alias="currentStock")
    forecasted_demand: Optional[float] = Field(default=None, alias="forecastedDemand")
    reorder_quantity: Optional[float] = Field(default=None, alias="reorderQuantity")
    notes: Optional[str] = None
    analysis_date: Optional[str] = Field(default=None, alias="analysisDate")
    source: Optional[str] = None


class CategoryStatusRow(BaseModel):
    """Data contract for one row of the category status report."""

    model_config = ConfigDict(populate_by_name=True)

    category: str = Field(..., alias="Category")
    items: int = Field(default=0, ge=0, alias="Items")
    units: int = Field(default=0, alias="Units")
    low_stock: int = Field(default=0, ge=0, alias="Low Stock")
    status: StockStatus = Field(..., alias="Status")
    report_date: date = Field(..., alias="Date")


class RecommendationRow(BaseModel):
    """Data contract for one row of the size-ordered recommendations report."""

    model_config = ConfigDict(populate_by_name=True)

    group: str = Field(..., alias="Group")
    position: int = Field(..., ge=1, alias="Position")
    size: str = Field(default="N/A", alias="Size")
    recommended_stock: float = Field(default=0, alias="Recommended Stock")
    current_stock: Optional[int] = Field(default=None, alias="Current Stock")
    forecasted_demand: Optional[float] = Field(default=None, alias="Forecasted Demand")
    report_date: date = Field(..., alias="Date")
