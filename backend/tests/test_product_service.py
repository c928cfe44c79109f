import asyncio

from app.models.shopify import Order, Product
from app.services.product_service import ProductService, best_selling, low_stock, worst_selling
from app.services.sales_service import aggregate_sales
from conftest import STORE, make_line_item, make_order, make_product


def _products(raw):
    return [Product.model_validate(p) for p in raw]


def _sales(raw_orders):
    return aggregate_sales(Order.model_validate(o) for o in raw_orders)


# =============================================================================
# Best / worst selling
# =============================================================================

def test_best_selling_sorted_descending_and_includes_zero_sales(catalog, sales_orders):
    rows = best_selling(_products(catalog), _sales(sales_orders), STORE, limit=10)

    assert [r.id for r in rows] == [4, 1, 5, 2, 3]
    assert [r.total_sold for r in rows] == [8, 5, 1, 0, 0]


def test_best_selling_respects_limit(catalog, sales_orders):
    rows = best_selling(_products(catalog), _sales(sales_orders), STORE, limit=2)

    assert [r.id for r in rows] == [4, 1]


def test_worst_selling_sorted_ascending_with_unsold_first(catalog, sales_orders):
    rows = worst_selling(_products(catalog), _sales(sales_orders), STORE, limit=3)

    assert [r.total_sold for r in rows] == [0, 0, 1]
    assert [r.id for r in rows] == [2, 3, 5]


def test_sales_rows_carry_urls_and_revenue(catalog, sales_orders):
    row = best_selling(_products(catalog), _sales(sales_orders), STORE, limit=1)[0]

    assert row.revenue == 240.0
    assert row.currency == "USD"
    assert row.admin_url == f"https://{STORE}/admin/products/4"
    assert row.public_url == f"https://{STORE}/products/delta-bag"
    assert row.image == "https://cdn.example.com/4.png"


def test_sales_views_with_no_orders(catalog):
    rows = best_selling(_products(catalog), {}, STORE)

    assert len(rows) == 5
    assert all(r.total_sold == 0 for r in rows)


# =============================================================================
# Low stock
# =============================================================================

def test_low_stock_reports_minimum_tracked_inventory(catalog):
    entries = low_stock(_products(catalog), STORE, threshold=5)

    assert [(e.product_id, e.stock) for e in entries] == [(3, 0), (1, 3), (5, 5)]


def test_untracked_variants_never_low_stock(catalog):
    entries = low_stock(_products(catalog), STORE, threshold=1000, limit=None)

    assert 2 not in {e.product_id for e in entries}
    assert all(e.stock != -1 for e in entries)


def test_low_stock_picks_variant_with_lowest_stock(catalog):
    entries = {e.product_id: e for e in low_stock(_products(catalog), STORE, threshold=5)}

    assert entries[1].variant_id == 100
    assert entries[5].variant_id == 501
    assert entries[5].low_variant_count == 1


def test_low_stock_threshold_is_inclusive(catalog):
    entries = low_stock(_products(catalog), STORE, threshold=0)

    assert [e.product_id for e in entries] == [3]


def test_low_stock_limit(catalog):
    assert len(low_stock(_products(catalog), STORE, threshold=100, limit=2)) == 2
    assert len(low_stock(_products(catalog), STORE, threshold=100, limit=None)) == 4


def test_low_stock_ignores_missing_inventory():
    products = _products([make_product(9, "No Data", [None, None])])

    assert low_stock(products, STORE, threshold=5) == []


# =============================================================================
# Service
# =============================================================================

def test_service_best_selling_fetches_products_and_orders(shopify, catalog, sales_orders):
    shopify.list_products.return_value = catalog
    shopify.list_orders.return_value = sales_orders
    service = ProductService(shopify, store_domain=STORE)

    rows = asyncio.run(service.get_best_selling(limit=3))

    assert [r.id for r in rows] == [4, 1, 5]
    shopify.list_products.assert_awaited_once_with(limit=250)
    shopify.list_orders.assert_awaited_once_with(limit=250, status="any")
    shopify.get_products_by_ids.assert_not_awaited()


def test_service_best_selling_fetches_sellers_outside_catalog_page(shopify, catalog, sales_orders):
    shopify.list_products.return_value = catalog
    shopify.list_orders.return_value = sales_orders + [
        make_order(4, line_items=[make_line_item(9, 50)]),
    ]
    shopify.get_products_by_ids.return_value = [make_product(9, "Zeta Scarf", [12])]
    service = ProductService(shopify, store_domain=STORE)

    rows = asyncio.run(service.get_best_selling(limit=2))

    assert [(r.id, r.total_sold) for r in rows] == [(9, 50), (4, 8)]
    assert rows[0].name == "Zeta Scarf"
    shopify.get_products_by_ids.assert_awaited_once_with([9])


def test_service_low_stock_uses_default_threshold(shopify, catalog):
    shopify.list_products.return_value = catalog
    service = ProductService(shopify, store_domain=STORE)

    entries = asyncio.run(service.get_low_stock())

    assert [e.product_id for e in entries] == [3, 1, 5]
    shopify.list_orders.assert_not_awaited()
