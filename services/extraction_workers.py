import multiprocessing
import time

from api import build_pipeline
from config.extraction_config import ExtractionConfig
from config.settings import QUEUE_RETRY_DELAY
from core import ExtractionPipeline
from lib.errors import MalformedPayload, PublishFailed, QueueUnavailable
from lib.redis import RedisQueue, create_redis
from type_defs.payloads import QueuePayload


def start_extraction_workers(
    config: ExtractionConfig, workers: int
) -> list[multiprocessing.Process]:
    """
    Starts extraction worker processes.

    Parameters
    ----------
    config : ExtractionConfig
        Settings shared by every worker.

    workers : int
        Number of extraction workers to spawn.

    Returns
    -------
    list of multiprocessing.Process
        List of running extraction worker processes.
    """

    ctx = multiprocessing.get_context("spawn")
    extraction_processes = []

    for _ in range(workers):
        process = ctx.Process(
            target=extraction_worker,
            args=(config,),
        )

        process.start()
        extraction_processes.append(process)

    return extraction_processes


def extraction_worker(config: ExtractionConfig):
    """
    Main loop for the extraction worker.

    Blocks on the extraction queue and runs one task at a time until a
    stop signal is popped.
    """

    queue = RedisQueue(create_redis(config.redis_host, config.redis_port), config.max_attempts)
    pipeline = build_pipeline(config, queue)

    while True:
        try:
            item = queue.consume(config.extraction_queue)
        except MalformedPayload as e:
            print(f"[worker] dropping unreadable queue item: {e}")
            continue
        except QueueUnavailable as e:
            print(f"[worker] queue unavailable, retrying in {QUEUE_RETRY_DELAY}s: {e}")
            time.sleep(QUEUE_RETRY_DELAY)
            continue

        if item is None:  # sentinel value.
            break

        handle_queue_item(pipeline, queue, item)


def handle_queue_item(
    pipeline: ExtractionPipeline, queue: RedisQueue, item: QueuePayload
) -> bool:
    """
    Runs one envelope through the pipeline.

    A failed item goes back on its queue with attempt + 1 until
    max_attempts is reached; malformed payloads are never retried.

    Returns
    -------
    bool
        True if the task went through the whole pipeline.
    """

    print(f"[worker] {item.item_id} attempt {item.attempt}/{item.max_attempts}")

    try:
        result = pipeline.process(item)

    except MalformedPayload as e:
        print(f"[worker] {item.item_id} malformed payload, not retrying: {e}")
        return False

    except Exception as e:
        print(f"[worker] {item.item_id} error processing task: {e!r}")

        if item.attempt < item.max_attempts:
            try:
                queue.redeliver(item)
                print(f"[worker] {item.item_id} redelivered as attempt {item.attempt + 1}")
            except PublishFailed as redeliver_error:
                print(f"[worker] {item.item_id} could not be redelivered: {redeliver_error}")
        else:
            print(f"[worker] {item.item_id} dropped after {item.max_attempts} attempts")

        return False

    print(
        f"[worker] {result.task_id} done: {result.page_count} pages, "
        f"{result.batch_count} batches, {result.segment_count} segments"
    )

    return True
