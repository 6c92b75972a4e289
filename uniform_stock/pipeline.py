import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel

from . import data_handler
from .client import ApiSession, InventoryApiClient

logger = logging.getLogger(__name__)


class DataPipeline(ABC):
    """
    Abstract base class for the stock report pipelines.
    Follows an Extract -> Transform -> Load (ETL) pattern.
    """

    def __init__(
        self,
        report_type: str,
        client: Optional[InventoryApiClient] = None,
        test_mode: bool = False,
    ):
        self.report_type = report_type
        self.client = client if client is not None else InventoryApiClient(ApiSession.from_settings())
        self.test_mode = test_mode
        # Filled by transform(); sent along with the rows to the webhook.
        self.metadata: dict[str, Any] = {}

    def run(self) -> Optional[list[BaseModel]]:
        """
        Orchestrates the pipeline execution. Returns the validated rows,
        or None when extraction or transformation failed.
        """
        logger.info(f"🚀 STEP: {self.report_type.upper()} REPORT")
        logger.info("-" * 30)

        # --- 1. EXTRACT ---
        raw_data = self.extract()
        if raw_data is None:
            logger.error(f"❌ Extraction failed for {self.report_type}. Nothing saved.")
            return None
        if not raw_data:
            logger.warning(f"⚠️ No data extracted for {self.report_type}.")
            self.load([])
            return []

        # --- 2. TRANSFORM ---
        validated_data = self.transform(raw_data)
        if validated_data is None:
            logger.error(f"❌ Transformation failed for {self.report_type}.")
            return None

        # --- 3. LOAD ---
        self.load(validated_data)

        logger.info(f"✅ {self.report_type.capitalize()} Pipeline Finished.\n")
        logger.info("=" * 60)
        return validated_data

    @abstractmethod
    def extract(self) -> list[Any] | None:
        """
        Fetches the raw records this report is built from.
        Returns None when the source failed, an empty list when it had no records.
        """

    @abstractmethod
    def transform(self, records: list[Any]) -> list[BaseModel] | None:
        """
        Turns raw records into validated report rows.
        Returns None when the rows do not validate.
        """

    def load(self, validated_data: list[BaseModel]):
        """
        Saves data to disk and posts to webhook.
        """
        if self.metadata:
            logger.info("\n--- Summary ---")
            for key, value in self.metadata.items():
                logger.info(f"{key}: {value}")

        if validated_data:
            data_handler.save_outputs(validated_data, self.report_type)
        else:
            logger.warning("No data to save to disk.")

        if not self.test_mode:
            data_handler.post_to_webhook(
                validated_data=validated_data,
                metadata=self.metadata,
                report_type=self.report_type,
            )
        else:
            logger.info("🧪 Test Mode: Skipping webhook post.")
