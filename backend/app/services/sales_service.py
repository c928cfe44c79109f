from typing import Dict, Iterable

from app.models.shopify import Order
from app.models.views import SalesRecord


def aggregate_sales(orders: Iterable[Order]) -> Dict[int, SalesRecord]:
    """
    Sum units sold and revenue per product across ``orders``.

    Line items whose product was deleted (``product_id`` is null) are skipped.
    Revenue is ``price * quantity`` per line. The result does not depend on
    the order of the input.
    """
    sales: Dict[int, SalesRecord] = {}
    for order in orders:
        for item in order.line_items:
            if item.product_id is None:
                continue
            record = sales.get(item.product_id)
            if record is None:
                record = SalesRecord(
                    product_id=item.product_id,
                    name=item.name or item.title,
                    currency=order.currency,
                )
                sales[item.product_id] = record
            record.quantity += item.quantity
            record.revenue += (item.price or 0.0) * item.quantity
    return sales
