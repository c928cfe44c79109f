import asyncio

from app.models.shopify import Customer
from app.services.customer_service import CustomerService, customer_stats


def _customers():
    return [
        {"id": 1, "first_name": "Ada", "last_name": "L", "email": "a@x.com", "verified_email": True,
         "total_spent": "300.00", "orders_count": 3},
        {"id": 2, "email": "b@x.com", "verified_email": False, "total_spent": "100.00", "orders_count": 1},
        {"id": 3, "first_name": "Cy", "verified_email": True, "total_spent": None, "orders_count": None},
    ]


def test_customer_stats_totals_and_average():
    stats = customer_stats(Customer.model_validate(c) for c in _customers())

    assert stats.total == 3
    assert stats.verified == 2
    assert stats.unverified == 1
    assert stats.total_spent == 400.0
    assert stats.total_orders == 4
    assert stats.average_order_value == 100.0


def test_top_customers_ranked_by_spend():
    stats = customer_stats(Customer.model_validate(c) for c in _customers())

    assert [c.id for c in stats.top_customers] == [1, 2, 3]
    assert [c.name for c in stats.top_customers] == ["Ada L", "b@x.com", "Cy"]


def test_stats_with_no_customers():
    stats = customer_stats([])

    assert stats.total == 0
    assert stats.average_order_value == 0.0


def test_service_stats_reads_one_page(shopify):
    shopify.list_customers.return_value = _customers()

    stats = asyncio.run(CustomerService(shopify).get_stats())

    assert stats.total == 3
    shopify.list_customers.assert_awaited_once_with(limit=250)
