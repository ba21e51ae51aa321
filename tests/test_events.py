import asyncio
import json

from nomad_cabs import events
from nomad_cabs.rabbitmq import RabbitPublisher


class RecordingPublisher:
    def __init__(self):
        self.sent = []

    async def publish(self, routing_key, message_body, message_id=None):
        self.sent.append((routing_key, json.loads(message_body), message_id))


def test_emit_publishes_envelope_with_message_id(monkeypatch):
    recorder = RecordingPublisher()
    monkeypatch.setattr(events, "publisher", recorder)

    asyncio.run(events.emit(events.PAYMENT_UPDATED, {"booking_id": "b-1"}))

    [(routing_key, body, message_id)] = recorder.sent
    assert routing_key == "payment.updated"
    assert body["event_type"] == "payment.updated"
    assert body["data"] == {"booking_id": "b-1"}
    assert message_id == body["event_id"]


def test_publisher_without_url_is_a_noop():
    publisher = RabbitPublisher(url=None)
    assert publisher.enabled is False

    asyncio.run(publisher.publish("payment.updated", "{}", message_id="m-1"))
    assert publisher._exchange is None
