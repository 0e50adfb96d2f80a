import uuid

from pydantic import ValidationError

from config.extraction_config import ExtractionConfig
from core import ExtractionPipeline
from lib.db import PostgresTaskStore, create_pool
from lib.doc_tools import LibreOfficeConverter
from lib.errors import MalformedPayload
from lib.pdla import PdlaClient
from lib.redis import RedisQueue
from lib.s3 import S3ArtifactStore, create_client
from type_defs.payloads import ExtractionPayload, ProducePayload, QueuePayload


def build_pipeline(config: ExtractionConfig, queue: RedisQueue) -> ExtractionPipeline:
    """
    Wires the concrete collaborators (postgres, s3, libreoffice, the
    layout service and the redis queue) into an `ExtractionPipeline`.
    """

    return ExtractionPipeline(
        config=config,
        task_store=PostgresTaskStore(create_pool(config.database_url)),
        artifact_store=S3ArtifactStore(
            create_client(config.s3_endpoint, config.aws_region)
        ),
        converter=LibreOfficeConverter(
            config.libreoffice_bin, config.conversion_timeout
        ),
        segmenter=PdlaClient(config.pdla_url, config.pdla_timeout),
        publisher=queue,
    )


def enqueue_extraction(
    queue: RedisQueue, config: ExtractionConfig, data: dict
) -> QueuePayload:
    """
    Validates an extraction request and puts it on the extraction queue.

    The payload is enqueued as received so downstream stages see the same
    fields the producer sent.
    """

    try:
        ExtractionPayload.model_validate(data)
    except ValidationError as e:
        raise MalformedPayload(str(e)) from e

    produce_payload = ProducePayload(
        queue_name=config.extraction_queue,
        payload=data,
        item_id=str(uuid.uuid4()),
        max_attempts=config.max_attempts,
    )

    return queue.produce([produce_payload])[0]
