import json
import uuid
from datetime import datetime, timezone

from .rabbitmq import publisher

USER_REGISTERED = "user.registered"
USER_STATUS_CHANGED = "user.status_changed"
BOOKING_CREATED = "booking.created"
BOOKING_STATUS_CHANGED = "booking.status_changed"
TRANSACTION_RECORDED = "transaction.recorded"
VERIFICATION_UPDATED = "verification.updated"
PAYMENT_UPDATED = "payment.updated"


def build_event(event_type: str, data: dict) -> dict:
    return {
        "event_id": str(uuid.uuid4()),
        "event_type": event_type,
        "occurred_at": datetime.now(timezone.utc).isoformat(),
        "data": data,
    }


def to_json(event: dict) -> str:
    return json.dumps(event, separators=(",", ":"), ensure_ascii=False, default=str)


async def emit(event_type: str, data: dict):
    event = build_event(event_type, data)
    await publisher.publish(event_type, to_json(event), message_id=event["event_id"])
