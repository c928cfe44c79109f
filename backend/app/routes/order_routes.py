from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.dependencies import get_order_service
from app.services.order_service import OrderService
from app.utils.validation import parse_date_param, parse_id

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("")
async def list_orders(
    limit: int = Query(250, ge=1, le=250),
    status: str = "any",
    fulfillment_status: Optional[str] = None,
    service: OrderService = Depends(get_order_service),
):
    orders = await service.get_orders(limit=limit, status=status, fulfillment_status=fulfillment_status)
    return {"success": True, "data": orders, "count": len(orders)}


@router.get("/pending")
async def pending_orders(service: OrderService = Depends(get_order_service)):
    orders = await service.get_pending_orders()
    return {"success": True, "data": orders, "count": len(orders)}


@router.get("/date-range")
async def orders_by_date_range(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    limit: int = Query(250, ge=1, le=250),
    status: str = "any",
    service: OrderService = Depends(get_order_service),
):
    if not start_date or not end_date:
        raise HTTPException(status_code=400, detail="Start date and end date are required")
    start = parse_date_param(start_date, "start_date")
    end = parse_date_param(end_date, "end_date", end_of_day=True)
    if start > end:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")

    orders = await service.get_orders_by_date_range(start, end, limit=limit, status=status)
    return {
        "success": True,
        "data": orders,
        "count": len(orders),
        "dateRange": {"start": start_date, "end": end_date},
    }


@router.get("/{order_id}")
async def get_order(order_id: str, service: OrderService = Depends(get_order_service)):
    oid = parse_id(order_id, "Order ID")
    order = await service.get_order(oid)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return {"success": True, "data": order}
