"""
Notification View Builder
─────────────────────────
Turns recent orders into dashboard notifications.

Read/archived flags live in a NotificationStateStore owned by the process:
it starts empty, is never persisted, and an id with no entry is simply
unread and not archived.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from app.config.settings import settings
from app.models.shopify import FinancialStatus, FulfillmentStatus, Order
from app.models.views import NotificationRecord
from app.services.shopify_service import ShopifyService
from app.utils.logger import get_logger

logger = get_logger(__name__)

HIGH_VALUE_THRESHOLD = 500.0
HIGH_PRIORITY_THRESHOLD = 1000.0
DEFAULT_NOTIFICATION_LIMIT = 50


# ─────────────────────────────────────────────────────────────
# State store
# ─────────────────────────────────────────────────────────────

@dataclass
class NotificationState:
    read: bool = False
    archived: bool = False


class NotificationStateStore:
    def __init__(self) -> None:
        self._states: Dict[int, NotificationState] = {}

    def get(self, notification_id: int) -> Optional[NotificationState]:
        return self._states.get(notification_id)

    def _upsert(self, notification_id: int) -> NotificationState:
        state = self._states.get(notification_id)
        if state is None:
            state = NotificationState()
            self._states[notification_id] = state
        return state

    def mark_read(self, notification_id: int) -> NotificationState:
        state = self._upsert(notification_id)
        state.read = True
        return state

    def archive(self, notification_id: int) -> NotificationState:
        state = self._upsert(notification_id)
        state.archived = True
        return state

    def mark_all_read(self) -> int:
        """Mark every non-archived entry read. Returns how many entries were touched."""
        count = 0
        for state in list(self._states.values()):
            if not state.archived:
                state.read = True
                count += 1
        return count

    def stats(self) -> Dict[str, int]:
        states = list(self._states.values())
        return {
            "total": len(states),
            "read": sum(1 for s in states if s.read),
            "unread": sum(1 for s in states if not s.read),
            "archived": sum(1 for s in states if s.archived),
            "active": sum(1 for s in states if not s.archived),
        }

    def __len__(self) -> int:
        return len(self._states)


# ─────────────────────────────────────────────────────────────
# Classification / formatting
# ─────────────────────────────────────────────────────────────

def _awaiting_shipment(order: Order) -> bool:
    return (
        order.financial_status == FinancialStatus.PAID
        and order.fulfillment_status == FulfillmentStatus.UNFULFILLED
    )


def classify(order: Order) -> Tuple[str, str]:
    """Return ``(type, priority)``. Rules are checked in order; first match wins."""
    value = order.total_price or 0.0

    if value > HIGH_VALUE_THRESHOLD:
        kind = "high-value"
    elif _awaiting_shipment(order):
        kind = "pending-fulfillment"
    elif order.financial_status == FinancialStatus.PENDING:
        kind = "payment-pending"
    elif order.financial_status == FinancialStatus.REFUNDED:
        kind = "refunded"
    else:
        kind = "new-order"

    if value > HIGH_PRIORITY_THRESHOLD:
        priority = "high"
    elif value > HIGH_VALUE_THRESHOLD or _awaiting_shipment(order):
        priority = "medium"
    else:
        priority = "low"

    return kind, priority


def _order_label(order: Order) -> str:
    if order.name:
        return order.name
    return f"#{order.order_number if order.order_number is not None else order.id}"


def format_order_for_notification(order: Order) -> Optional[NotificationRecord]:
    """Build the notification for one order, or ``None`` when the order has no id."""
    if order.id is None:
        logger.warning("Skipping order without id — name=%s", order.name)
        return None

    created_at = order.created_at
    if created_at is None:
        created_at = datetime.now(timezone.utc)
        logger.warning("Order %s has no created_at; using current time", order.id)

    customer = order.customer.full_name if order.customer else ""
    kind, priority = classify(order)

    return NotificationRecord(
        id=order.id,
        order_label=_order_label(order),
        customer=customer or "Guest",
        order_value=order.total_price or 0.0,
        currency=order.currency or "USD",
        status=order.fulfillment_status.value if order.fulfillment_status else "unfulfilled",
        financial_status=order.financial_status.value if order.financial_status else "pending",
        created_at=created_at,
        type=kind,
        priority=priority,
    )


# ─────────────────────────────────────────────────────────────
# Service
# ─────────────────────────────────────────────────────────────

class NotificationService:
    def __init__(self, shopify: ShopifyService, store: NotificationStateStore):
        self.shopify = shopify
        self.store = store

    def merge_state(self, record: NotificationRecord) -> NotificationRecord:
        state = self.store.get(record.id)
        if state is not None:
            record.read = state.read
            record.archived = state.archived
        return record

    def build(self, raw: Any) -> Optional[NotificationRecord]:
        try:
            order = Order.model_validate(raw)
        except ValidationError as exc:
            raw_id = raw.get("id") if isinstance(raw, dict) else None
            logger.warning("Skipping malformed order id=%s: %s", raw_id, exc.errors()[:3])
            return None
        record = format_order_for_notification(order)
        return self.merge_state(record) if record else None

    async def list_notifications(
        self,
        hours: Optional[int] = None,
        limit: int = DEFAULT_NOTIFICATION_LIMIT,
    ) -> List[NotificationRecord]:
        if hours is None:
            hours = settings.notification_hours
        since = datetime.now(timezone.utc) - timedelta(hours=hours)
        logger.info("Fetching orders from last %d hours (since %s)", hours, since.isoformat())

        raw_orders = await self.shopify.list_orders(limit=limit, status="any", created_at_min=since.isoformat())

        notifications = [n for n in (self.build(o) for o in raw_orders) if n is not None]
        notifications.sort(
            key=lambda n: n.created_at if n.created_at.tzinfo else n.created_at.replace(tzinfo=timezone.utc),
            reverse=True,
        )
        logger.info("Notifications built: %d of %d orders", len(notifications), len(raw_orders))
        return notifications

    def mark_read(self, notification_id: int) -> None:
        self.store.mark_read(notification_id)
        logger.info("Notification %s marked as read", notification_id)

    def archive(self, notification_id: int) -> None:
        self.store.archive(notification_id)
        logger.info("Notification %s archived", notification_id)

    def mark_all_read(self) -> int:
        count = self.store.mark_all_read()
        logger.info("%d notifications marked as read", count)
        return count

    def stats(self) -> Dict[str, int]:
        return self.store.stats()
