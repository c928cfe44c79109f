"""
Shopify Admin REST records
──────────────────────────
Typed snapshots of the JSON returned by the Admin API. Only the fields the
dashboard reads are declared; everything else in the payload is ignored.

Shopify sends money as strings ("12.50") and omits or nulls most fields
freely, so every field is optional and money is coerced leniently: a value
that cannot be parsed becomes ``None`` instead of failing the whole payload.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Variant.inventory_quantity when the merchant has switched tracking off.
UNTRACKED_INVENTORY = -1


def parse_money(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


# =============================================================================
# Enums
# =============================================================================

class FinancialStatus(str, Enum):
    """Payment state of an order. Unrecognized values map to OTHER."""
    PENDING = "pending"
    AUTHORIZED = "authorized"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"
    PARTIALLY_REFUNDED = "partially_refunded"
    REFUNDED = "refunded"
    VOIDED = "voided"
    CANCELLED = "cancelled"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> Optional["FinancialStatus"]:
        if value is None or value == "":
            return None
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.OTHER


class FulfillmentStatus(str, Enum):
    """Shipping state of an order. ``None`` on the order means nothing shipped yet."""
    FULFILLED = "fulfilled"
    PARTIAL = "partial"
    RESTOCKED = "restocked"
    UNFULFILLED = "unfulfilled"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> Optional["FulfillmentStatus"]:
        if value is None or value == "":
            return None
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.OTHER


class ShopifyRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")


# =============================================================================
# Customers / addresses
# =============================================================================

class Customer(ShopifyRecord):
    id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    verified_email: bool = False
    orders_count: int = 0
    total_spent: Optional[float] = None

    @field_validator("total_spent", mode="before")
    @classmethod
    def _money(cls, v: Any) -> Optional[float]:
        return parse_money(v)

    @field_validator("orders_count", mode="before")
    @classmethod
    def _count(cls, v: Any) -> int:
        try:
            return int(v or 0)
        except (TypeError, ValueError):
            return 0

    @property
    def full_name(self) -> str:
        """``"first last"`` with missing parts dropped; empty when both are missing."""
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class Address(ShopifyRecord):
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    country: Optional[str] = None
    zip: Optional[str] = None
    phone: Optional[str] = None


# =============================================================================
# Orders
# =============================================================================

class LineItem(ShopifyRecord):
    id: Optional[int] = None
    # Null once the product has been deleted from the catalog.
    product_id: Optional[int] = None
    variant_id: Optional[int] = None
    name: Optional[str] = None
    title: Optional[str] = None
    quantity: int = Field(default=0, ge=0)
    price: Optional[float] = None
    total_discount: Optional[float] = None
    vendor: Optional[str] = None
    sku: Optional[str] = None

    @field_validator("price", "total_discount", mode="before")
    @classmethod
    def _money(cls, v: Any) -> Optional[float]:
        return parse_money(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity(cls, v: Any) -> Any:
        return 0 if v is None else v


class Order(ShopifyRecord):
    id: Optional[int] = None
    order_number: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None

    financial_status: Optional[FinancialStatus] = None
    fulfillment_status: Optional[FulfillmentStatus] = None

    total_price: Optional[float] = None
    subtotal_price: Optional[float] = None
    total_tax: Optional[float] = None
    currency: Optional[str] = None

    customer: Optional[Customer] = None
    line_items: list[LineItem] = Field(default_factory=list)
    shipping_address: Optional[Address] = None
    billing_address: Optional[Address] = None

    note: Optional[str] = None
    tags: Optional[str] = None
    source_name: Optional[str] = None

    @field_validator("total_price", "subtotal_price", "total_tax", mode="before")
    @classmethod
    def _money(cls, v: Any) -> Optional[float]:
        return parse_money(v)

    @field_validator("financial_status", mode="before")
    @classmethod
    def _financial(cls, v: Any) -> Optional[FinancialStatus]:
        return FinancialStatus.parse(v)

    @field_validator("fulfillment_status", mode="before")
    @classmethod
    def _fulfillment(cls, v: Any) -> Optional[FulfillmentStatus]:
        return FulfillmentStatus.parse(v)

    @field_validator("line_items", mode="before")
    @classmethod
    def _line_items(cls, v: Any) -> Any:
        return v or []


# =============================================================================
# Products
# =============================================================================

class Variant(ShopifyRecord):
    id: Optional[int] = None
    title: Optional[str] = None
    price: Optional[float] = None
    sku: Optional[str] = None
    # Signed. UNTRACKED_INVENTORY (-1) means unlimited, 0 means sold out.
    inventory_quantity: Optional[int] = None

    @field_validator("price", mode="before")
    @classmethod
    def _money(cls, v: Any) -> Optional[float]:
        return parse_money(v)

    @property
    def is_tracked(self) -> bool:
        return self.inventory_quantity is not None and self.inventory_quantity != UNTRACKED_INVENTORY


class ProductImage(ShopifyRecord):
    id: Optional[int] = None
    src: Optional[str] = None
    alt: Optional[str] = None


class Product(ShopifyRecord):
    id: int
    title: Optional[str] = None
    handle: Optional[str] = None
    vendor: Optional[str] = None
    product_type: Optional[str] = None
    status: Optional[str] = None
    variants: list[Variant] = Field(default_factory=list)
    images: list[ProductImage] = Field(default_factory=list)

    @field_validator("variants", "images", mode="before")
    @classmethod
    def _lists(cls, v: Any) -> Any:
        return v or []

    @property
    def primary_image(self) -> Optional[str]:
        return self.images[0].src if self.images else None
