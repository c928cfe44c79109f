import asyncio

import httpx
import pytest

from app.services.shopify_service import ShopifyAPIError, ShopifyService
from conftest import STORE, make_order


def _service(handler) -> ShopifyService:
    return ShopifyService(STORE, "shpat_abc", api_version="2024-01", transport=httpx.MockTransport(handler))


def test_list_orders_sends_token_and_filters():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["token"] = request.headers.get("X-Shopify-Access-Token")
        return httpx.Response(200, json={"orders": [make_order(1)]})

    orders = asyncio.run(
        _service(handler).list_orders(limit=50, status="any", fulfillment_status="unfulfilled")
    )

    assert [o["id"] for o in orders] == [1]
    assert seen["token"] == "shpat_abc"
    assert seen["url"].path == "/admin/api/2024-01/orders.json"
    assert seen["url"].params["fulfillment_status"] == "unfulfilled"
    assert seen["url"].params["limit"] == "50"
    assert "created_at_min" not in seen["url"].params


def test_products_by_ids_joins_ids():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["ids"] = request.url.params["ids"]
        return httpx.Response(200, json={"products": []})

    assert asyncio.run(_service(handler).get_products_by_ids([3, 1, 2])) == []
    assert seen["ids"] == "3,1,2"


def test_non_2xx_raises_with_status_and_details():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"errors": "Invalid API key or access token"})

    with pytest.raises(ShopifyAPIError) as excinfo:
        asyncio.run(_service(handler).list_products())

    assert excinfo.value.status_code == 401
    assert excinfo.value.details == {"errors": "Invalid API key or access token"}
    assert "GET products.json" in excinfo.value.message


def test_unreachable_upstream_raises_502():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ShopifyAPIError) as excinfo:
        asyncio.run(_service(handler).list_customers())

    assert excinfo.value.status_code == 502


def test_timeout_raises_504():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(ShopifyAPIError) as excinfo:
        asyncio.run(_service(handler).list_orders())

    assert excinfo.value.status_code == 504


def test_missing_collection_key_yields_empty_list():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    assert asyncio.run(_service(handler).list_orders()) == []
