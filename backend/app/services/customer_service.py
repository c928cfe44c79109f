from typing import Iterable, List, Optional

from app.models.shopify import Customer
from app.models.views import CustomerStats, CustomerSummary
from app.services.shopify_service import ShopifyService
from app.utils.logger import get_logger

logger = get_logger(__name__)

TOP_CUSTOMERS = 5


def customer_stats(customers: Iterable[Customer]) -> CustomerStats:
    customers = list(customers)
    total_spent = sum(c.total_spent or 0.0 for c in customers)
    total_orders = sum(c.orders_count for c in customers)
    top = sorted(customers, key=lambda c: c.total_spent or 0.0, reverse=True)[:TOP_CUSTOMERS]

    return CustomerStats(
        total=len(customers),
        verified=sum(1 for c in customers if c.verified_email),
        unverified=sum(1 for c in customers if not c.verified_email),
        total_spent=round(total_spent, 2),
        total_orders=total_orders,
        average_order_value=round(total_spent / total_orders, 2) if total_orders else 0.0,
        top_customers=[
            CustomerSummary(
                id=c.id,
                name=c.full_name or c.email or "Guest",
                email=c.email,
                total_spent=c.total_spent or 0.0,
                orders_count=c.orders_count,
            )
            for c in top
        ],
    )


class CustomerService:
    def __init__(self, shopify: ShopifyService):
        self.shopify = shopify

    async def list_customers(self, limit: int = 250) -> List[dict]:
        customers = await self.shopify.list_customers(limit=limit)
        logger.info("Customers fetched: %d", len(customers))
        return customers

    async def get_customer(self, customer_id: int) -> Optional[dict]:
        return await self.shopify.get_customer(customer_id)

    async def get_stats(self) -> CustomerStats:
        raw = await self.shopify.list_customers(limit=250)
        stats = customer_stats(Customer.model_validate(c) for c in raw)
        logger.info("Customer stats calculated for %d customers", stats.total)
        return stats
