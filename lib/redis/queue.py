import uuid

from pydantic import ValidationError
from redis.exceptions import RedisError

from lib.errors import MalformedPayload, PublishFailed, QueueUnavailable
from type_defs.payloads import ProducePayload, QueuePayload

STOP_SIGNAL = b"__STOP__"


def queue_key(queue_name: str) -> str:
    return f"queue:{queue_name}"


def encode_queue_item(queue_payload: QueuePayload) -> bytes:
    return queue_payload.model_dump_json().encode("utf-8")


def decode_queue_item(raw: bytes) -> QueuePayload:
    try:
        return QueuePayload.model_validate_json(raw)
    except ValidationError as e:
        raise MalformedPayload(f"Invalid queue envelope: {e}") from e


class RedisQueue:
    """Envelopes stored as json on redis lists, one list per queue name."""

    def __init__(self, redis, default_max_attempts: int = 3):
        self.redis = redis
        self.default_max_attempts = default_max_attempts

    def produce(self, items: list[ProducePayload]) -> list[QueuePayload]:
        queued = [
            QueuePayload(
                payload=item.payload,
                attempt=1,
                max_attempts=item.max_attempts or self.default_max_attempts,
                item_id=item.item_id,
                queue_name=item.queue_name,
            )
            for item in items
        ]

        for queue_payload in queued:
            self._push(queue_payload.queue_name, encode_queue_item(queue_payload))

        return queued

    def publish(self, queue_name: str, payload: dict) -> QueuePayload:
        produce_payload = ProducePayload(
            queue_name=queue_name,
            payload=payload,
            item_id=str(uuid.uuid4()),
        )

        return self.produce([produce_payload])[0]

    def redeliver(self, queue_payload: QueuePayload) -> QueuePayload:
        retry = queue_payload.model_copy(update={"attempt": queue_payload.attempt + 1})
        self._push(retry.queue_name, encode_queue_item(retry))

        return retry

    def consume(self, queue_name: str, timeout: int = 0) -> QueuePayload | None:
        """
        Blocks until an item is available on queue_name.

        return -> the envelope, or None on timeout or stop signal.
        """

        try:
            raw = self.redis.blpop([queue_key(queue_name)], timeout=timeout)
        except RedisError as e:
            raise QueueUnavailable(f"Failed to pop from queue {queue_name}: {e}") from e

        if raw is None or raw[1] == STOP_SIGNAL:
            return None

        return decode_queue_item(raw[1])

    def stop(self, queue_name: str):
        self._push(queue_name, STOP_SIGNAL)

    def _push(self, queue_name: str, packed: bytes):
        try:
            self.redis.rpush(queue_key(queue_name), packed)
        except RedisError as e:
            raise PublishFailed(f"Failed to push to queue {queue_name}: {e}") from e
