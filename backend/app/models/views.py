"""
Response shapes built by the view services.

Field names follow what the dashboard frontend already consumes, which is
why notifications use camelCase aliases while everything else is snake_case.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SalesRecord(BaseModel):
    """Units sold and revenue for one product across the scanned orders."""
    product_id: int
    name: Optional[str] = None
    quantity: int = 0
    revenue: float = 0.0
    currency: Optional[str] = None


class ProductSales(BaseModel):
    id: int
    product_id: int
    name: Optional[str] = None
    handle: Optional[str] = None
    image: Optional[str] = None
    total_sold: int = 0
    revenue: float = 0.0
    currency: str = "USD"
    admin_url: str
    public_url: Optional[str] = None


class LowStockEntry(BaseModel):
    id: int
    product_id: int
    # Variant holding the lowest tracked stock.
    variant_id: Optional[int] = None
    name: Optional[str] = None
    handle: Optional[str] = None
    image: Optional[str] = None
    stock: int
    low_variant_count: int
    admin_url: str
    public_url: Optional[str] = None


class OrderCustomer(BaseModel):
    id: Optional[int] = None
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None


class ShippingSummary(BaseModel):
    name: Optional[str] = None
    address1: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    country: Optional[str] = None
    zip: Optional[str] = None


class OrderLine(BaseModel):
    id: Optional[int] = None
    product_id: Optional[int] = None
    variant_id: Optional[int] = None
    name: Optional[str] = None
    title: Optional[str] = None
    quantity: int = 0
    price: Optional[float] = None
    total_discount: Optional[float] = None


class NormalizedOrder(BaseModel):
    id: Optional[int] = None
    order_number: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    total_price: Optional[float] = None
    subtotal_price: Optional[float] = None
    total_tax: Optional[float] = None
    currency: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    financial_status: Optional[str] = None
    fulfillment_status: Optional[str] = None
    customer: OrderCustomer
    shipping_address: Optional[ShippingSummary] = None
    line_items: list[OrderLine] = Field(default_factory=list)
    note: Optional[str] = None
    tags: Optional[str] = None
    source_name: Optional[str] = None
    admin_url: str
    public_url: str
    summary: str


class NotificationRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    order_label: str = Field(alias="orderId")
    customer: str
    order_value: float = Field(alias="orderValue")
    currency: str
    status: str
    financial_status: str = Field(alias="financialStatus")
    created_at: datetime = Field(alias="createdAt")
    type: str
    priority: str
    read: bool = False
    archived: bool = False


class CustomerSummary(BaseModel):
    id: Optional[int] = None
    name: str
    email: Optional[str] = None
    total_spent: float = 0.0
    orders_count: int = 0


class CustomerStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int
    verified: int
    unverified: int
    total_spent: float = Field(alias="totalSpent")
    total_orders: int = Field(alias="totalOrders")
    average_order_value: float = Field(alias="averageOrderValue")
    top_customers: list[CustomerSummary] = Field(alias="topCustomers")
