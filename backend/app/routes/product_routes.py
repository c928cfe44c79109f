from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.config.settings import settings
from app.dependencies import get_product_service
from app.services.product_service import ProductService
from app.utils.validation import parse_id

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("")
async def list_products(
    limit: int = Query(250, ge=1, le=250),
    page_info: Optional[str] = None,
    service: ProductService = Depends(get_product_service),
):
    products = await service.list_products(limit=limit, page_info=page_info)
    return {"success": True, "data": products, "count": len(products)}


@router.get("/low-stock")
async def low_stock_products(
    threshold: Optional[int] = Query(None, ge=0),
    limit: int = Query(10, ge=1, le=250),
    service: ProductService = Depends(get_product_service),
):
    products = await service.get_low_stock(threshold=threshold, limit=limit)
    return {
        "success": True,
        "data": products,
        "count": len(products),
        "threshold": threshold if threshold is not None else settings.low_stock_threshold,
    }


@router.get("/best-selling")
async def best_selling_products(
    limit: int = Query(10, ge=1, le=250),
    service: ProductService = Depends(get_product_service),
):
    products = await service.get_best_selling(limit=limit)
    return {"success": True, "data": products, "count": len(products)}


@router.get("/worst-selling")
async def worst_selling_products(
    limit: int = Query(10, ge=1, le=250),
    service: ProductService = Depends(get_product_service),
):
    products = await service.get_worst_selling(limit=limit)
    return {"success": True, "data": products, "count": len(products)}


@router.get("/{product_id}")
async def get_product(product_id: str, service: ProductService = Depends(get_product_service)):
    pid = parse_id(product_id, "Product ID")
    product = await service.get_product(pid)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"success": True, "data": product}
