import httpx
from typing import Any, Dict, List, Optional

from app.config.settings import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Order fields requested from the Admin API; keeps payloads small.
ORDER_FIELDS = [
    "id",
    "order_number",
    "name",
    "email",
    "phone",
    "created_at",
    "updated_at",
    "processed_at",
    "cancelled_at",
    "closed_at",
    "financial_status",
    "fulfillment_status",
    "total_price",
    "subtotal_price",
    "total_tax",
    "currency",
    "line_items",
    "customer",
    "shipping_address",
    "billing_address",
    "note",
    "tags",
    "source_name",
]


class ShopifyAPIError(Exception):
    """The Admin API answered non-2xx, or could not be reached at all."""

    def __init__(self, operation: str, status_code: int, details: Any = None):
        super().__init__(f"Shopify API Error in {operation}")
        self.operation = operation
        self.status_code = status_code
        self.details = details

    @property
    def message(self) -> str:
        return str(self)


class ShopifyService:
    def __init__(
        self,
        shop_domain: str,
        access_token: str,
        api_version: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.shop = shop_domain
        self.token = access_token
        self.api_version = api_version or settings.shopify_admin_api_version
        self.timeout = timeout if timeout is not None else settings.shopify_request_timeout
        self.base_url = f"https://{shop_domain}/admin/api/{self.api_version}"
        self.headers = {
            "X-Shopify-Access-Token": access_token,
            "Content-Type": "application/json",
        }
        self._transport = transport

    @classmethod
    def from_settings(cls) -> "ShopifyService":
        return cls(settings.shopify_store_domain, settings.shopify_admin_api_token)

    async def _get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> dict:
        url = f"{self.base_url}/{endpoint}"
        operation = f"GET {endpoint}"
        logger.debug("Shopify API Request: %s params=%s", operation, params)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, headers=self.headers, params=params or {})
        except httpx.TimeoutException as exc:
            logger.error("Shopify API timeout: %s after %.1fs", operation, self.timeout)
            raise ShopifyAPIError(operation, 504, str(exc)) from exc
        except httpx.RequestError as exc:
            logger.error("Shopify API unreachable: %s: %s", operation, exc)
            raise ShopifyAPIError(operation, 502, str(exc)) from exc

        if not response.is_success:
            logger.error("Shopify API Error [%d] %s: %.300s", response.status_code, operation, response.text)
            try:
                details = response.json()
            except ValueError:
                details = response.text
            raise ShopifyAPIError(operation, response.status_code, details)

        logger.debug("Shopify API Response: %d %s", response.status_code, operation)
        return response.json()

    # ── Orders ────────────────────────────────────────────────────────────────

    async def list_orders(
        self,
        limit: int = 250,
        status: str = "any",
        fulfillment_status: Optional[str] = None,
        created_at_min: Optional[str] = None,
    ) -> List[dict]:
        params: Dict[str, Any] = {
            "limit": limit,
            "status": status,
            "fields": ",".join(ORDER_FIELDS),
        }
        if fulfillment_status:
            params["fulfillment_status"] = fulfillment_status
        if created_at_min:
            params["created_at_min"] = created_at_min
        data = await self._get("orders.json", params)
        return data.get("orders") or []

    async def get_order(self, order_id: int) -> Optional[dict]:
        data = await self._get(f"orders/{order_id}.json", {"fields": ",".join(ORDER_FIELDS)})
        return data.get("order")

    # ── Products ──────────────────────────────────────────────────────────────

    async def list_products(self, limit: int = 250, page_info: Optional[str] = None) -> List[dict]:
        params: Dict[str, Any] = {"limit": limit}
        if page_info:
            params["page_info"] = page_info
        data = await self._get("products.json", params)
        return data.get("products") or []

    async def get_products_by_ids(self, ids: List[int]) -> List[dict]:
        if not ids:
            return []
        data = await self._get("products.json", {"ids": ",".join(str(i) for i in ids)})
        return data.get("products") or []

    async def get_product(self, product_id: int) -> Optional[dict]:
        data = await self._get(f"products/{product_id}.json")
        return data.get("product")

    # ── Customers ─────────────────────────────────────────────────────────────

    async def list_customers(self, limit: int = 250) -> List[dict]:
        data = await self._get("customers.json", {"limit": limit})
        return data.get("customers") or []

    async def get_customer(self, customer_id: int) -> Optional[dict]:
        data = await self._get(f"customers/{customer_id}.json")
        return data.get("customer")

    # ── Shop / user ───────────────────────────────────────────────────────────

    async def get_shop_info(self) -> dict:
        data = await self._get("shop.json")
        return data.get("shop", {})

    async def get_current_user(self) -> dict:
        data = await self._get("users/current.json")
        return data.get("user", {})
