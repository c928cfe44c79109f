from fastapi import APIRouter, Depends, HTTPException, Query

from app.dependencies import get_customer_service
from app.services.customer_service import CustomerService
from app.utils.validation import parse_id

router = APIRouter(prefix="/api/customers", tags=["customers"])


@router.get("")
async def list_customers(
    limit: int = Query(250, ge=1, le=250),
    service: CustomerService = Depends(get_customer_service),
):
    customers = await service.list_customers(limit=limit)
    return {"success": True, "data": customers, "count": len(customers)}


@router.get("/stats")
async def customer_stats(service: CustomerService = Depends(get_customer_service)):
    return {"success": True, "data": await service.get_stats()}


@router.get("/{customer_id}")
async def get_customer(customer_id: str, service: CustomerService = Depends(get_customer_service)):
    cid = parse_id(customer_id, "Customer ID")
    customer = await service.get_customer(cid)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return {"success": True, "data": customer}
