"""
Shared pytest fixtures.

pydantic-settings reads the environment when app.config.settings is first
imported, so the required variables are set here before any app import.
"""
import os

os.environ.setdefault("SHOPIFY_STORE_DOMAIN", "test-store.myshopify.com")
os.environ.setdefault("SHOPIFY_ADMIN_API_TOKEN", "shpat_test_token_0000")
os.environ.setdefault("SHOPIFY_API_KEY", "test_api_key")
os.environ.setdefault("SHOPIFY_API_SECRET", "test_api_secret")

from typing import Any, Optional
from unittest.mock import AsyncMock

import pytest

from app.services.notification_service import NotificationStateStore

STORE = "test-store.myshopify.com"


def make_order(
    order_id: Optional[int] = 1001,
    *,
    total_price: Any = "50.00",
    financial_status: Optional[str] = "paid",
    fulfillment_status: Optional[str] = None,
    created_at: Optional[str] = "2024-03-01T10:00:00-05:00",
    customer: Optional[dict] = None,
    line_items: Optional[list] = None,
    **extra: Any,
) -> dict:
    """Build a raw order dict shaped like the Admin API payload."""
    order = {
        "id": order_id,
        "order_number": 1000 + (order_id or 0) % 1000,
        "name": f"#{1000 + (order_id or 0) % 1000}",
        "total_price": total_price,
        "currency": "USD",
        "financial_status": financial_status,
        "fulfillment_status": fulfillment_status,
        "created_at": created_at,
        "customer": customer,
        "line_items": line_items if line_items is not None else [],
    }
    order.update(extra)
    return order


def make_line_item(product_id: Optional[int], quantity: int, price: str = "10.00", name: str = "Widget") -> dict:
    return {
        "id": (product_id or 0) * 10 + quantity,
        "product_id": product_id,
        "variant_id": (product_id or 0) * 100,
        "name": name,
        "title": name,
        "quantity": quantity,
        "price": price,
        "total_discount": "0.00",
    }


def make_product(product_id: int, title: str, inventory: list, handle: Optional[str] = None) -> dict:
    return {
        "id": product_id,
        "title": title,
        "handle": handle or title.lower().replace(" ", "-"),
        "variants": [
            {"id": product_id * 100 + i, "title": f"V{i}", "price": "10.00", "inventory_quantity": qty}
            for i, qty in enumerate(inventory)
        ],
        "images": [{"id": 1, "src": f"https://cdn.example.com/{product_id}.png"}],
    }


@pytest.fixture
def shopify() -> AsyncMock:
    """Stand-in for ShopifyService; each test sets the return values it needs."""
    fake = AsyncMock()
    fake.list_orders.return_value = []
    fake.list_products.return_value = []
    fake.list_customers.return_value = []
    fake.get_products_by_ids.return_value = []
    fake.get_order.return_value = None
    fake.get_product.return_value = None
    fake.get_customer.return_value = None
    return fake


@pytest.fixture
def notification_store() -> NotificationStateStore:
    return NotificationStateStore()


@pytest.fixture
def catalog() -> list:
    return [
        make_product(1, "Alpha Tee", [3, 10]),
        make_product(2, "Beta Mug", [-1, -1]),
        make_product(3, "Gamma Cap", [0, -1]),
        make_product(4, "Delta Bag", [20]),
        make_product(5, "Epsilon Sock", [7, 5, -1]),
    ]


@pytest.fixture
def sales_orders() -> list:
    return [
        make_order(1, line_items=[make_line_item(1, 2), make_line_item(4, 1, price="30.00")]),
        make_order(2, line_items=[make_line_item(1, 3), make_line_item(None, 9)]),
        make_order(3, line_items=[make_line_item(4, 7, price="30.00"), make_line_item(5, 1)]),
    ]
