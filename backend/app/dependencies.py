from fastapi import Depends, Request

from app.services.customer_service import CustomerService
from app.services.notification_service import NotificationService, NotificationStateStore
from app.services.order_service import OrderService
from app.services.product_service import ProductService
from app.services.shopify_service import ShopifyService


def get_shopify_service() -> ShopifyService:
    return ShopifyService.from_settings()


def get_notification_store(request: Request) -> NotificationStateStore:
    # Created once per process in create_app().
    return request.app.state.notification_store


def get_product_service(shopify: ShopifyService = Depends(get_shopify_service)) -> ProductService:
    return ProductService(shopify)


def get_order_service(shopify: ShopifyService = Depends(get_shopify_service)) -> OrderService:
    return OrderService(shopify)


def get_customer_service(shopify: ShopifyService = Depends(get_shopify_service)) -> CustomerService:
    return CustomerService(shopify)


def get_notification_service(
    shopify: ShopifyService = Depends(get_shopify_service),
    store: NotificationStateStore = Depends(get_notification_store),
) -> NotificationService:
    return NotificationService(shopify, store)
