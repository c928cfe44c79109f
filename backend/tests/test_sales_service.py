from app.models.shopify import Order
from app.services.sales_service import aggregate_sales
from conftest import make_line_item, make_order


def _orders(raw):
    return [Order.model_validate(o) for o in raw]


def test_quantities_are_summed_per_product(sales_orders):
    sales = aggregate_sales(_orders(sales_orders))

    assert sales[1].quantity == 5
    assert sales[4].quantity == 8
    assert sales[5].quantity == 1


def test_revenue_is_price_times_quantity(sales_orders):
    sales = aggregate_sales(_orders(sales_orders))

    assert sales[1].revenue == 50.0
    assert sales[4].revenue == 240.0
    assert sales[1].currency == "USD"


def test_deleted_products_are_skipped(sales_orders):
    sales = aggregate_sales(_orders(sales_orders))

    assert None not in sales
    assert set(sales) == {1, 4, 5}


def test_unreferenced_products_do_not_appear():
    sales = aggregate_sales(_orders([make_order(1, line_items=[make_line_item(7, 1)])]))

    assert list(sales) == [7]


def test_empty_input_yields_empty_mapping():
    assert aggregate_sales([]) == {}
    assert aggregate_sales(_orders([make_order(1, line_items=None)])) == {}


def test_result_does_not_depend_on_order_sequence(sales_orders):
    forward = aggregate_sales(_orders(sales_orders))
    backward = aggregate_sales(_orders(list(reversed(sales_orders))))

    assert {k: (v.quantity, v.revenue) for k, v in forward.items()} == {
        k: (v.quantity, v.revenue) for k, v in backward.items()
    }


def test_zero_quantity_line_initialises_record():
    sales = aggregate_sales(_orders([make_order(1, line_items=[make_line_item(3, 0)])]))

    assert sales[3].quantity == 0
    assert sales[3].revenue == 0.0
