import logging
from datetime import date
from typing import Optional

from pydantic import ValidationError

from uniform_stock.aggregation import group_by_type
from uniform_stock.client import ApiError, InventoryApiClient
from uniform_stock.pipeline import DataPipeline
from uniform_stock.schemas import RecommendationRow, RecommendedStockItem
from uniform_stock.sizes import order_by_size_domain

logger = logging.getLogger(__name__)


class RecommendationPipeline(DataPipeline):
    """Recommended stock per "category - type" group, each group in size order."""

    def __init__(
        self,
        category: Optional[str] = None,
        item_type: Optional[str] = None,
        client: Optional[InventoryApiClient] = None,
        test_mode: bool = False,
    ):
        super().__init__("recommendations", client=client, test_mode=test_mode)
        self.category = category
        self.item_type = item_type
        self.report_date = date.today()

    def extract(self) -> list[RecommendedStockItem] | None:
        logger.info("--- Fetching latest recommendations ---")
        try:
            items = self.client.get_all_recommendations(
                category=self.category, item_type=self.item_type, latest=True
            )
        except ApiError as e:
            logger.error(f"❌ Could not fetch recommendations: {e}")
            return None
        except ValidationError as e:
            logger.error("❌ Recommendations did not match the expected shape!")
            logger.error(e)
            return None
        logger.info(f"  > Received {len(items)} recommendations.")
        return items

    def transform(self, items: list[RecommendedStockItem]) -> list[RecommendationRow] | None:
        logger.info("\n--- Grouping and Ordering by Size ---")
        groups = group_by_type(items)

        rows = []
        try:
            for group, members in groups.items():
                ordered = order_by_size_domain(members, domain_hint=members[0].type)
                for position, item in enumerate(ordered, start=1):
                    rows.append(
                        RecommendationRow(
                            group=group,
                            position=position,
                            size=item.size or "N/A",
                            recommended_stock=item.recommended_stock,
                            current_stock=item.current_stock,
                            forecasted_demand=item.forecasted_demand,
                            report_date=self.report_date,
                        )
                    )
        except ValidationError as e:
            logger.error("❌ Data validation failed!")
            logger.error(e)
            return None

        self.metadata = {
            "reportDate": self.report_date.isoformat(),
            "groups": len(groups),
            "rows": len(rows),
        }
        logger.info(f"✅ Ordered {len(rows)} rows across {len(groups)} groups.")
        return rows
