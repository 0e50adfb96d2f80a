import json

import pytest

from lib.errors import MalformedPayload, ModelInvocationFailed, PublishFailed, QueueUnavailable
from lib.redis import STOP_SIGNAL, RedisQueue, queue_key
from redis.exceptions import ConnectionError as RedisConnectionError
import services.extraction_workers as extraction_workers
from services.extraction_workers import extraction_worker, handle_queue_item
from tests.fakes import FakeRedis
from type_defs.payloads import ProducePayload
from type_defs.shared import PipelineResult


class BrokenRedis(FakeRedis):
    def rpush(self, key, value):
        raise RedisConnectionError("connection refused")

    def blpop(self, keys, timeout=0):
        raise RedisConnectionError("connection refused")


class FlakyRedis(FakeRedis):
    def __init__(self, failures: int = 1):
        super().__init__()
        self.failures = failures

    def blpop(self, keys, timeout=0):
        if self.failures > 0:
            self.failures -= 1
            raise RedisConnectionError("reset by peer")
        return super().blpop(keys, timeout)


class StubPipeline:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.processed = []

    def process(self, item):
        self.processed.append(item)
        if self.error is not None:
            raise self.error
        return PipelineResult(
            task_id="task-1",
            page_count=7,
            batch_count=3,
            segment_count=7,
            pdf_location="s3://bucket/user-1/task-1/report.pdf",
            output_location="s3://bucket/user-1/task-1/output.json",
        )


def test_publish_pushes_a_fresh_envelope(extraction_payload: dict) -> None:
    redis = FakeRedis()
    queue = RedisQueue(redis, default_max_attempts=5)

    queued = queue.publish("extraction-ocr", extraction_payload)

    [raw] = redis.lists[queue_key("extraction-ocr")]
    envelope = json.loads(raw)
    assert envelope == {
        "payload": extraction_payload,
        "attempt": 1,
        "max_attempts": 5,
        "item_id": queued.item_id,
        "queue_name": "extraction-ocr",
    }


def test_produce_keeps_explicit_max_attempts(extraction_payload: dict) -> None:
    queue = RedisQueue(FakeRedis())

    [queued] = queue.produce(
        [ProducePayload(queue_name="extraction", payload=extraction_payload, item_id="i", max_attempts=7)]
    )

    assert queued.max_attempts == 7


def test_consume_and_redeliver_increments_attempt(extraction_payload: dict) -> None:
    queue = RedisQueue(FakeRedis())
    queue.publish("extraction", extraction_payload)

    item = queue.consume("extraction")
    queue.redeliver(item)
    retried = queue.consume("extraction")

    assert item.attempt == 1
    assert retried.attempt == 2
    assert retried.item_id == item.item_id
    assert retried.payload == extraction_payload
    assert queue.consume("extraction") is None


def test_stop_signal_ends_consumption() -> None:
    redis = FakeRedis()
    queue = RedisQueue(redis)

    queue.stop("extraction")

    assert redis.lists[queue_key("extraction")] == [STOP_SIGNAL]
    assert queue.consume("extraction") is None


def test_unreadable_envelope_is_malformed() -> None:
    redis = FakeRedis()
    redis.rpush(queue_key("extraction"), b'{"attempt": 1}')

    with pytest.raises(MalformedPayload):
        RedisQueue(redis).consume("extraction")


def test_redis_failure_is_publish_failure(extraction_payload: dict) -> None:
    with pytest.raises(PublishFailed):
        RedisQueue(BrokenRedis()).publish("extraction-ocr", extraction_payload)


def test_redis_failure_on_consume_is_queue_unavailable() -> None:
    with pytest.raises(QueueUnavailable, match="extraction"):
        RedisQueue(BrokenRedis()).consume("extraction")


def test_failed_item_is_redelivered_until_attempts_run_out(make_queue_payload) -> None:
    redis = FakeRedis()
    queue = RedisQueue(redis)
    pipeline = StubPipeline(error=ModelInvocationFailed("boom"))

    assert handle_queue_item(pipeline, queue, make_queue_payload(attempt=1, max_attempts=2)) is False
    redelivered = queue.consume("extraction")
    assert redelivered.attempt == 2

    assert handle_queue_item(pipeline, queue, redelivered) is False
    assert queue.consume("extraction") is None


def test_malformed_payload_is_not_redelivered(make_queue_payload) -> None:
    queue = RedisQueue(FakeRedis())
    pipeline = StubPipeline(error=MalformedPayload("bad"))

    assert handle_queue_item(pipeline, queue, make_queue_payload()) is False
    assert queue.consume("extraction") is None


def test_successful_item_is_not_requeued(make_queue_payload) -> None:
    queue = RedisQueue(FakeRedis())
    pipeline = StubPipeline()

    assert handle_queue_item(pipeline, queue, make_queue_payload()) is True
    assert len(pipeline.processed) == 1
    assert queue.consume("extraction") is None


def test_failed_redelivery_does_not_escape(make_queue_payload) -> None:
    queue = RedisQueue(BrokenRedis())
    pipeline = StubPipeline(error=ModelInvocationFailed("boom"))

    assert handle_queue_item(pipeline, queue, make_queue_payload(attempt=1, max_attempts=3)) is False
    assert len(pipeline.processed) == 1


def test_worker_waits_out_a_redis_outage(monkeypatch, config, make_queue_payload) -> None:
    redis = FlakyRedis(failures=2)
    queue = RedisQueue(redis)
    queue.produce(
        [ProducePayload(queue_name="extraction", payload=make_queue_payload().payload, item_id="item-1")]
    )
    queue.stop("extraction")
    pipeline = StubPipeline()
    sleeps = []

    monkeypatch.setattr(extraction_workers, "create_redis", lambda host, port: redis)
    monkeypatch.setattr(extraction_workers, "build_pipeline", lambda config, queue: pipeline)
    monkeypatch.setattr(extraction_workers.time, "sleep", sleeps.append)

    extraction_worker(config)

    assert sleeps == [extraction_workers.QUEUE_RETRY_DELAY] * 2
    assert [item.item_id for item in pipeline.processed] == ["item-1"]
    assert redis.lists[queue_key("extraction")] == []
