from datetime import datetime, timezone
from typing import Iterable, List, Optional

from app.config.settings import settings
from app.models.shopify import Order
from app.models.views import NormalizedOrder, OrderCustomer, OrderLine, ShippingSummary
from app.services.shopify_service import ShopifyService
from app.utils.logger import get_logger

logger = get_logger(__name__)

PENDING_ORDERS_LIMIT = 50

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _as_aware(value: Optional[datetime]) -> datetime:
    if value is None:
        return _EPOCH
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def sort_orders_by_date(orders: Iterable[Order], limit: Optional[int] = None) -> List[Order]:
    """Newest first. Orders without ``created_at`` sink to the end."""
    ordered = sorted(orders, key=lambda o: _as_aware(o.created_at), reverse=True)
    return ordered if limit is None else ordered[:limit]


def _customer_name(order: Order) -> str:
    customer = order.customer
    if customer is None:
        return "Guest"
    return customer.full_name or customer.email or "Guest"


def normalize_order(order: Order, store_domain: str) -> NormalizedOrder:
    """Project a Shopify order into the shape the dashboard renders. Pure."""
    customer = order.customer
    shipping = order.shipping_address

    return NormalizedOrder(
        id=order.id,
        order_number=order.order_number,
        name=order.name,
        email=order.email,
        total_price=order.total_price,
        subtotal_price=order.subtotal_price,
        total_tax=order.total_tax,
        currency=order.currency,
        created_at=order.created_at,
        updated_at=order.updated_at,
        financial_status=order.financial_status.value if order.financial_status else None,
        fulfillment_status=order.fulfillment_status.value if order.fulfillment_status else None,
        customer=OrderCustomer(
            id=customer.id if customer else None,
            name=_customer_name(order),
            email=customer.email if customer else None,
            phone=customer.phone if customer else None,
        ),
        shipping_address=ShippingSummary(
            name=shipping.name,
            address1=shipping.address1,
            city=shipping.city,
            province=shipping.province,
            country=shipping.country,
            zip=shipping.zip,
        ) if shipping else None,
        line_items=[
            OrderLine(
                id=item.id,
                product_id=item.product_id,
                variant_id=item.variant_id,
                name=item.name,
                title=item.title,
                quantity=item.quantity,
                price=item.price,
                total_discount=item.total_discount,
            )
            for item in order.line_items
        ],
        note=order.note,
        tags=order.tags,
        source_name=order.source_name,
        admin_url=f"https://{store_domain}/admin/orders/{order.id}",
        public_url=f"https://{store_domain}/orders/{order.order_number}",
        summary=", ".join(f"{item.quantity}x {item.name}" for item in order.line_items),
    )


class OrderService:
    def __init__(self, shopify: ShopifyService, store_domain: Optional[str] = None):
        self.shopify = shopify
        self.store_domain = store_domain or settings.shopify_store_domain

    def _normalize_all(self, orders: Iterable[Order]) -> List[NormalizedOrder]:
        return [normalize_order(o, self.store_domain) for o in orders]

    async def get_orders(
        self,
        limit: int = 250,
        status: str = "any",
        fulfillment_status: Optional[str] = None,
    ) -> List[NormalizedOrder]:
        raw = await self.shopify.list_orders(limit=limit, status=status, fulfillment_status=fulfillment_status)
        orders = [Order.model_validate(o) for o in raw]
        logger.info("Orders fetched: %d", len(orders))
        return self._normalize_all(orders)

    async def get_pending_orders(self) -> List[NormalizedOrder]:
        """
        Unfulfilled orders, newest first.

        When nothing is unfulfilled, fall back to the most recent orders of any
        fulfillment state so the dashboard widget is never empty just because
        every recent order already shipped.
        """
        raw = await self.shopify.list_orders(
            limit=PENDING_ORDERS_LIMIT, status="any", fulfillment_status="unfulfilled"
        )
        logger.info("Unfulfilled orders fetched: %d", len(raw))

        if not raw:
            logger.info("No unfulfilled orders, falling back to recent orders")
            raw = await self.shopify.list_orders(limit=PENDING_ORDERS_LIMIT, status="any")
            logger.info("Recent orders fetched: %d", len(raw))

        orders = sort_orders_by_date(
            (Order.model_validate(o) for o in raw), limit=PENDING_ORDERS_LIMIT
        )
        return self._normalize_all(orders)

    async def get_order(self, order_id: int) -> Optional[NormalizedOrder]:
        raw = await self.shopify.get_order(order_id)
        if not raw:
            return None
        return normalize_order(Order.model_validate(raw), self.store_domain)

    async def get_orders_by_date_range(
        self,
        start: datetime,
        end: datetime,
        limit: int = 250,
        status: str = "any",
    ) -> List[NormalizedOrder]:
        # The Admin API filters the lower bound; the upper bound is applied here.
        raw = await self.shopify.list_orders(limit=limit, status=status, created_at_min=start.isoformat())
        orders = [
            o for o in (Order.model_validate(r) for r in raw)
            if o.created_at is not None and _as_aware(o.created_at) <= end
        ]
        logger.info("Orders by date range: %d (start=%s end=%s)", len(orders), start.isoformat(), end.isoformat())
        return self._normalize_all(sort_orders_by_date(orders))
