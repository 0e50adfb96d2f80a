import json
import os
import tempfile

from dataclasses import dataclass, field
from pathlib import Path
from pydantic import ValidationError

from config.extraction_config import ExtractionConfig
from config.settings import (
    GENERIC_FAILURE_MESSAGE,
    USAGE_LIMIT_INDICATOR,
    USAGE_LIMIT_MESSAGE,
)
from core.aggregation import aggregate_segments
from core.interfaces import ArtifactStore, Converter, Publisher, Segmenter, TaskStore
from core.preprocess import preprocess
from core.status import TaskStatusTracker
from lib.doc_tools import split_pdf
from lib.errors import MalformedPayload, PublishFailed, WorkerError
from type_defs.payloads import ExtractionPayload, QueuePayload
from type_defs.segments import Segment
from type_defs.shared import PipelineResult, PipelineStage, PreprocessResult, Status
from utils.general import remove_path


def parse_extraction_payload(queue_payload: QueuePayload) -> ExtractionPayload:
    try:
        return ExtractionPayload.model_validate(queue_payload.payload)
    except ValidationError as e:
        raise MalformedPayload(
            f"Invalid extraction payload in item {queue_payload.item_id}: {e}"
        ) from e


def get_failure_message(error: BaseException) -> str:
    if USAGE_LIMIT_INDICATOR in str(error).lower():
        return USAGE_LIMIT_MESSAGE

    return GENERIC_FAILURE_MESSAGE


def get_segmentation_message(batch_number: int, batch_count: int) -> str:
    if batch_count > 1:
        return f"Segmenting | Batch {batch_number} of {batch_count}"

    return "Segmenting"


@dataclass
class PipelineRun:
    """State of one task's pass through the pipeline."""

    queue_payload: QueuePayload
    extraction_item: ExtractionPayload
    tracker: TaskStatusTracker
    file_name: str = ""
    stage: PipelineStage = PipelineStage.Received
    work_dir: str | None = None
    preprocessed: PreprocessResult | None = None
    batches: list[Path] = field(default_factory=list)
    batch_segments: list[list[Segment]] = field(default_factory=list)
    combined_output: list[Segment] = field(default_factory=list)

    def enter(self, stage: PipelineStage):
        self.stage = stage
        print(f"[pipeline] {self.extraction_item.task_id} {stage.value}")


class ExtractionPipeline:
    """
    Turns one queued extraction task into a segment list on object storage
    and a handoff message for the OCR stage.

    Stages run in a fixed order; any error aborts the run. Failures are
    recorded on the task row in one place (`_record_failure`) and then
    re-raised so the queue layer can decide on redelivery. Nothing is
    retried here.
    """

    def __init__(
        self,
        config: ExtractionConfig,
        task_store: TaskStore,
        artifact_store: ArtifactStore,
        converter: Converter,
        segmenter: Segmenter,
        publisher: Publisher,
    ):
        self.config = config
        self.task_store = task_store
        self.artifact_store = artifact_store
        self.converter = converter
        self.segmenter = segmenter
        self.publisher = publisher

        self.stages = [
            (PipelineStage.Preprocessing, self._preprocess),
            (PipelineStage.Splitting, self._split),
            (PipelineStage.Segmenting, self._segment),
            (PipelineStage.Aggregating, self._aggregate),
            (PipelineStage.Uploading, self._upload),
            (PipelineStage.Publishing, self._publish),
        ]

    def process(self, queue_payload: QueuePayload) -> PipelineResult:
        extraction_item = parse_extraction_payload(queue_payload)
        task_id = extraction_item.task_id
        user_id = extraction_item.user_id

        run = PipelineRun(
            queue_payload=queue_payload,
            extraction_item=extraction_item,
            tracker=TaskStatusTracker(self.task_store, task_id, user_id),
        )
        run.enter(PipelineStage.Received)

        run.file_name = self.task_store.get_file_name(task_id, user_id)
        run.tracker.set_status(
            Status.Processing,
            f"Task processing | Tries ({queue_payload.attempt}/{queue_payload.max_attempts})",
        )

        try:
            os.makedirs(self.config.temp_dir, exist_ok=True)
            run.work_dir = tempfile.mkdtemp(prefix=f"{task_id}-", dir=self.config.temp_dir)

            for stage, step in self.stages:
                run.enter(stage)
                step(run)

        except Exception as e:
            failed_stage = run.stage
            run.enter(PipelineStage.Aborted)
            print(f"[pipeline] {task_id} failed during {failed_stage.value}: {e!r}")
            try:
                self._record_failure(run, e)
            except WorkerError as record_error:
                print(f"[pipeline] {task_id} failed to record failure: {record_error!r}")
            raise

        finally:
            if run.work_dir is not None:
                remove_path(run.work_dir)

        run.enter(PipelineStage.Done)

        return PipelineResult(
            task_id=task_id,
            page_count=run.preprocessed.page_count,
            batch_count=len(run.batches),
            segment_count=len(run.combined_output),
            pdf_location=run.preprocessed.pdf_location,
            output_location=extraction_item.output_location,
        )

    def _preprocess(self, run: PipelineRun):
        run.preprocessed = preprocess(
            run.extraction_item,
            run.file_name,
            run.work_dir,
            self.config.s3_bucket,
            self.artifact_store,
            self.converter,
            self.task_store,
        )

    def _split(self, run: PipelineRun):
        run.batches = split_pdf(
            run.preprocessed.pdf_path,
            run.extraction_item.batch_size,
            os.path.join(run.work_dir, "batches"),
        )

    def _segment(self, run: PipelineRun):
        batch_count = len(run.batches)

        for batch_number, batch_path in enumerate(run.batches, start=1):
            run.tracker.set_status(
                Status.Processing, get_segmentation_message(batch_number, batch_count)
            )

            pdla_segments = self.segmenter.segment(batch_path, run.extraction_item.model)
            run.batch_segments.append(
                [pdla_segment.to_segment() for pdla_segment in pdla_segments]
            )

    def _aggregate(self, run: PipelineRun):
        run.combined_output = aggregate_segments(
            run.batch_segments, run.extraction_item.batch_size
        )

    def _upload(self, run: PipelineRun):
        output_path = Path(run.work_dir) / "segments.json"
        output = [segment.model_dump(mode="json") for segment in run.combined_output]

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(output, f)

        print(f"[pipeline] output file written: {output_path}, size: {output_path.stat().st_size} bytes")

        self.artifact_store.upload(
            output_path,
            run.extraction_item.output_location,
            content_type="application/json",
        )
        remove_path(str(output_path))

    def _publish(self, run: PipelineRun):
        queue_name = self.config.extraction_queue_ocr
        if not queue_name:
            raise PublishFailed("OCR queue name not configured")

        self.publisher.publish(queue_name, run.queue_payload.payload)
        print(f"[pipeline] {run.extraction_item.task_id} handed off to {queue_name}")

    def _record_failure(self, run: PipelineRun, error: BaseException):
        queue_payload = run.queue_payload
        error_message = get_failure_message(error)

        if queue_payload.attempt >= queue_payload.max_attempts:
            print(
                f"[pipeline] {run.extraction_item.task_id} failed after "
                f"{queue_payload.max_attempts} attempts"
            )
            run.tracker.set_status(Status.Failed, error_message)
        else:
            run.tracker.set_status(
                Status.Processing,
                f"{error_message} | Retrying ({queue_payload.attempt}/{queue_payload.max_attempts})",
            )
