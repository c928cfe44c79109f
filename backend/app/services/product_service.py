from typing import Dict, Iterable, List, Optional

from app.config.settings import settings
from app.models.shopify import Order, Product
from app.models.views import LowStockEntry, ProductSales, SalesRecord
from app.services.sales_service import aggregate_sales
from app.services.shopify_service import ShopifyService
from app.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_VIEW_LIMIT = 10
PRODUCT_PAGE_SIZE = 250


def admin_product_url(store_domain: str, product_id: int) -> str:
    return f"https://{store_domain}/admin/products/{product_id}"


def public_product_url(store_domain: str, handle: Optional[str]) -> Optional[str]:
    return f"https://{store_domain}/products/{handle}" if handle else None


# ─────────────────────────────────────────────────────────────
# Pure view builders
# ─────────────────────────────────────────────────────────────

def attach_sales(
    products: Iterable[Product],
    sales: Dict[int, SalesRecord],
    store_domain: str,
) -> List[ProductSales]:
    """Pair every product with its sales figures (zero when it never sold)."""
    rows = []
    for product in products:
        record = sales.get(product.id)
        rows.append(
            ProductSales(
                id=product.id,
                product_id=product.id,
                name=product.title,
                handle=product.handle,
                image=product.primary_image,
                total_sold=record.quantity if record else 0,
                revenue=round(record.revenue, 2) if record else 0.0,
                currency=(record.currency if record and record.currency else "USD"),
                admin_url=admin_product_url(store_domain, product.id),
                public_url=public_product_url(store_domain, product.handle),
            )
        )
    return rows


def best_selling(
    products: Iterable[Product],
    sales: Dict[int, SalesRecord],
    store_domain: str,
    limit: int = DEFAULT_VIEW_LIMIT,
) -> List[ProductSales]:
    # sorted() is stable, so ties keep catalog order.
    rows = sorted(attach_sales(products, sales, store_domain), key=lambda r: r.total_sold, reverse=True)
    return rows[:limit]


def worst_selling(
    products: Iterable[Product],
    sales: Dict[int, SalesRecord],
    store_domain: str,
    limit: int = DEFAULT_VIEW_LIMIT,
) -> List[ProductSales]:
    rows = sorted(attach_sales(products, sales, store_domain), key=lambda r: r.total_sold)
    return rows[:limit]


def low_stock(
    products: Iterable[Product],
    store_domain: str,
    threshold: int = 5,
    limit: Optional[int] = DEFAULT_VIEW_LIMIT,
) -> List[LowStockEntry]:
    """
    Products with at least one variant at ``0 <= inventory <= threshold``.

    Untracked variants (inventory -1 or missing) never count as low. The
    reported stock is the minimum over the product's tracked variants.
    ``limit=None`` returns every match.
    """
    entries: List[LowStockEntry] = []
    for product in products:
        tracked = [v for v in product.variants if v.is_tracked]
        low = [v for v in tracked if 0 <= v.inventory_quantity <= threshold]
        if not low:
            continue
        lowest = min(tracked, key=lambda v: v.inventory_quantity)
        entries.append(
            LowStockEntry(
                id=product.id,
                product_id=product.id,
                variant_id=lowest.id,
                name=product.title,
                handle=product.handle,
                image=product.primary_image,
                stock=lowest.inventory_quantity,
                low_variant_count=len(low),
                admin_url=admin_product_url(store_domain, product.id),
                public_url=public_product_url(store_domain, product.handle),
            )
        )

    entries.sort(key=lambda e: e.stock)
    return entries if limit is None else entries[:limit]


# ─────────────────────────────────────────────────────────────
# Service
# ─────────────────────────────────────────────────────────────

class ProductService:
    def __init__(self, shopify: ShopifyService, store_domain: Optional[str] = None):
        self.shopify = shopify
        self.store_domain = store_domain or settings.shopify_store_domain

    async def _fetch_products(self, limit: int = PRODUCT_PAGE_SIZE) -> List[Product]:
        raw = await self.shopify.list_products(limit=limit)
        return [Product.model_validate(p) for p in raw]

    async def _fetch_sales(self) -> Dict[int, SalesRecord]:
        raw = await self.shopify.list_orders(limit=settings.best_selling_order_window, status="any")
        orders = [Order.model_validate(o) for o in raw]
        sales = aggregate_sales(orders)
        logger.debug("Sales index built — orders=%d products_sold=%d", len(orders), len(sales))
        return sales

    async def list_products(self, limit: int = PRODUCT_PAGE_SIZE, page_info: Optional[str] = None) -> List[dict]:
        products = await self.shopify.list_products(limit=limit, page_info=page_info)
        logger.info("Products fetched: %d", len(products))
        return products

    async def get_product(self, product_id: int) -> Optional[dict]:
        return await self.shopify.get_product(product_id)

    async def _add_missing_sellers(
        self,
        products: List[Product],
        sales: Dict[int, SalesRecord],
    ) -> List[Product]:
        """Fetch sold products that fell outside the catalog page."""
        known = {p.id for p in products}
        missing = [pid for pid in sales if pid not in known]
        if not missing:
            return products

        extra: List[Product] = []
        # products.json accepts at most one page worth of ids per call
        for start in range(0, len(missing), PRODUCT_PAGE_SIZE):
            raw = await self.shopify.get_products_by_ids(missing[start:start + PRODUCT_PAGE_SIZE])
            extra.extend(Product.model_validate(p) for p in raw)
        logger.debug("Sold products outside catalog page — requested=%d found=%d", len(missing), len(extra))
        return products + extra

    async def get_best_selling(self, limit: int = DEFAULT_VIEW_LIMIT) -> List[ProductSales]:
        products = await self._fetch_products()
        sales = await self._fetch_sales()
        products = await self._add_missing_sellers(products, sales)
        result = best_selling(products, sales, self.store_domain, limit)
        logger.info("Best selling products: %d (catalog=%d)", len(result), len(products))
        return result

    async def get_worst_selling(self, limit: int = DEFAULT_VIEW_LIMIT) -> List[ProductSales]:
        products = await self._fetch_products()
        sales = await self._fetch_sales()
        result = worst_selling(products, sales, self.store_domain, limit)
        logger.info("Worst selling products: %d (catalog=%d)", len(result), len(products))
        return result

    async def get_low_stock(
        self,
        threshold: Optional[int] = None,
        limit: Optional[int] = DEFAULT_VIEW_LIMIT,
    ) -> List[LowStockEntry]:
        if threshold is None:
            threshold = settings.low_stock_threshold
        products = await self._fetch_products()
        result = low_stock(products, self.store_domain, threshold=threshold, limit=limit)
        logger.info("Low stock products: %d (threshold=%d)", len(result), threshold)
        return result
