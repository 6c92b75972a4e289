import logging
from datetime import date
from typing import Optional

from pydantic import ValidationError

from uniform_stock import settings, utils
from uniform_stock.aggregation import aggregate_by_category, classify_global_status
from uniform_stock.client import ApiError, InventoryApiClient
from uniform_stock.pipeline import DataPipeline
from uniform_stock.schemas import CategoryStatusRow, StockRecord, normalize_records

logger = logging.getLogger(__name__)


class InventoryStatusPipeline(DataPipeline):
    """Per-category stock status report, plus the global in/low/out tally."""

    def __init__(
        self,
        offline: bool = False,
        client: Optional[InventoryApiClient] = None,
        test_mode: bool = False,
    ):
        super().__init__("inventory_status", client=client, test_mode=test_mode)
        self.offline = offline
        self.report_date = date.today()

    def extract(self) -> list[StockRecord] | None:
        if self.offline:
            return self._extract_from_file()

        logger.info("--- Fetching inventory from API ---")
        try:
            records = self.client.get_inventory()
        except ApiError as e:
            logger.error(f"❌ Could not fetch inventory: {e}")
            return None
        logger.info(f"  > Received {len(records)} inventory lines.")
        return records

    def _extract_from_file(self) -> list[StockRecord] | None:
        logger.info("--- Reading inventory export ---")
        found = utils.find_latest_report(settings.INPUT_DIR, settings.INVENTORY_FILENAME_PREFIX)
        if not found:
            logger.warning(
                f"  > ⚠️  No '{settings.INVENTORY_FILENAME_PREFIX}*.json' file in {settings.INPUT_DIR}."
            )
            return None

        path, report_date = found
        logger.info(f"  > Found: {path.name} (File Date: {report_date})")
        payload = utils.load_json(path)
        if payload is None:
            return None

        self.report_date = report_date
        # Exports are either the bare list or the full API response body.
        if isinstance(payload, dict):
            payload = payload.get("inventory")
        if not isinstance(payload, list):
            logger.error(f"❌ {path.name} holds no inventory list.")
            return None
        return normalize_records(payload)

    def transform(self, records: list[StockRecord]) -> list[CategoryStatusRow] | None:
        logger.info("\n--- Aggregating by Category ---")
        aggregates = aggregate_by_category(records)
        tally = classify_global_status(records)

        self.metadata = {
            "reportDate": self.report_date.isoformat(),
            "categories": len(aggregates),
            **tally.model_dump(by_alias=True),
        }

        try:
            logger.info("Validating data against schema...")
            validated_data = [
                CategoryStatusRow(
                    category=category,
                    items=aggregate.distinct_item_count,
                    units=aggregate.total_units,
                    low_stock=aggregate.low_stock_count,
                    status=aggregate.status,
                    report_date=self.report_date,
                )
                for category, aggregate in aggregates.items()
            ]
        except ValidationError as e:
            logger.error("❌ Data validation failed!")
            logger.error(e)
            return None

        logger.info(f"✅ Data validation successful ({len(validated_data)} categories).")
        return validated_data
