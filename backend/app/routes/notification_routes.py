from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.config.settings import settings
from app.dependencies import get_notification_service
from app.services.notification_service import NotificationService
from app.utils.validation import parse_id

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("")
async def list_notifications(
    hours: Optional[int] = Query(None, ge=1),
    limit: int = Query(50, ge=1, le=250),
    service: NotificationService = Depends(get_notification_service),
):
    notifications = await service.list_notifications(hours=hours, limit=limit)
    return {
        "success": True,
        "data": notifications,
        "count": len(notifications),
        "timeRange": f"{hours or settings.notification_hours} hours",
    }


@router.get("/stats")
def notification_stats(service: NotificationService = Depends(get_notification_service)):
    return {"success": True, "data": service.stats()}


@router.patch("/mark-all-read")
def mark_all_read(service: NotificationService = Depends(get_notification_service)):
    count = service.mark_all_read()
    return {"success": True, "message": "All notifications marked as read", "count": count}


@router.patch("/{notification_id}/read")
def mark_read(notification_id: str, service: NotificationService = Depends(get_notification_service)):
    nid = parse_id(notification_id, "Notification ID")
    service.mark_read(nid)
    return {"success": True, "message": "Notification marked as read", "notificationId": nid}


@router.patch("/{notification_id}/archive")
def archive(notification_id: str, service: NotificationService = Depends(get_notification_service)):
    nid = parse_id(notification_id, "Notification ID")
    service.archive(nid)
    return {"success": True, "message": "Notification archived", "notificationId": nid}
