"""
Reporting services for the point-of-sale back office.

- Sales report: total revenue, number of transactions and a per-day chart
- Top products: best sellers by quantity, enriched with current catalog data
- CSV export of the per-day chart via django-import-export
"""

import logging
from typing import Any, Dict, List, Optional

from import_export import resources
from import_export.formats.base_formats import CSV
from tablib import Dataset

from apps.inventory.models import Product

logger = logging.getLogger(__name__)


class SalesReportService:
    """
    Builds report payloads from the order store.

    Args:
        store: OrderStore to query
    """

    def __init__(self, store):
        self.store = store

    def sales_report(self, start, end) -> Dict[str, Any]:
        """
        Revenue summary for [start, end].

        Returns:
            {"totalSales": ..., "transactions": ..., "chartData": [{"date", "sales", "transactions"}]}
        """
        summary = self.store.summarize(start, end)
        daily = self.store.aggregate_daily_totals(start, end)
        return {
            "totalSales": summary["total"],
            "transactions": summary["count"],
            "chartData": [
                {
                    "date": row.date.isoformat(),
                    "sales": row.total,
                    "transactions": row.count,
                }
                for row in daily
            ],
        }

    def top_products(self, start, end, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Best sellers for [start, end], highest quantity first.

        Name and image come from the first sale in the range. Price and
        category are the product's current values, or None once the product
        has been removed from the catalog.
        """
        top_items = self.store.aggregate_top_items(start, end, limit=limit)
        products = Product.objects.select_related("category").in_bulk(
            [item.product_id for item in top_items]
        )

        results = []
        for item in top_items:
            product = products.get(item.product_id)
            results.append(
                {
                    "product": {
                        "id": str(item.product_id),
                        "name": item.name,
                        "imageUrl": item.image_url,
                        "price": product.price if product else None,
                        "category": (
                            {"id": str(product.category.id), "name": product.category.name}
                            if product and product.category
                            else None
                        ),
                    },
                    "quantity": item.quantity,
                    "revenue": item.revenue,
                }
            )
        return results


class ReportDataResource(resources.Resource):
    """
    Django-import-export resource for report rows (list of dicts).
    """

    def __init__(self, data: List[Dict[str, Any]], **kwargs):
        super().__init__(**kwargs)
        self.data = data

    def export(self, queryset=None, *args, **kwargs):
        """Export the rows as a Dataset; headers come from the first row."""
        if not self.data:
            return Dataset()

        headers = list(self.data[0].keys())
        dataset = Dataset(headers=headers)
        for row in self.data:
            dataset.append([row.get(header, "") for header in headers])
        return dataset


class ReportExportService:
    """Export report data to CSV using django-import-export."""

    def export_to_csv(self, data: List[Dict[str, Any]]) -> str:
        """
        Render rows as CSV text.

        Raises:
            ValueError: If there is nothing to export
        """
        if not data:
            raise ValueError("No data to export")

        dataset = ReportDataResource(data).export()
        logger.debug(f"Exporting {len(data)} report rows to CSV")
        return CSV().export_data(dataset)
