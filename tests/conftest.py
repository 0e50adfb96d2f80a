from pathlib import Path

import pytest

from config.extraction_config import ExtractionConfig
from tests.fakes import write_pdf
from type_defs.payloads import QueuePayload


@pytest.fixture
def config(tmp_path: Path) -> ExtractionConfig:
    return ExtractionConfig(
        s3_bucket="bucket",
        database_url="postgresql://localhost/test",
        extraction_queue="extraction",
        extraction_queue_ocr="extraction-ocr",
        temp_dir=str(tmp_path / "work"),
    )


@pytest.fixture
def make_pdf(tmp_path: Path):
    def _make_pdf(pages: int, name: str = "source.pdf") -> Path:
        return write_pdf(tmp_path / name, pages)

    return _make_pdf


@pytest.fixture
def extraction_payload() -> dict:
    return {
        "task_id": "task-1",
        "user_id": "user-1",
        "input_location": "s3://uploads/user-1/report.pdf",
        "output_location": "s3://bucket/user-1/task-1/output.json",
        "batch_size": 3,
        "model": "default",
    }


@pytest.fixture
def make_queue_payload(extraction_payload: dict):
    def _make_queue_payload(attempt: int = 1, max_attempts: int = 3, **overrides) -> QueuePayload:
        return QueuePayload(
            payload={**extraction_payload, **overrides},
            attempt=attempt,
            max_attempts=max_attempts,
            item_id="item-1",
            queue_name="extraction",
        )

    return _make_queue_payload

