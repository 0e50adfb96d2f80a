from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class Status(Enum):
    Starting = "Starting"
    Processing = "Processing"
    Succeeded = "Succeeded"
    Failed = "Failed"


TERMINAL_STATUSES = (Status.Succeeded, Status.Failed)


class PipelineStage(Enum):
    Received = "received"
    Preprocessing = "preprocessing"
    Splitting = "splitting"
    Segmenting = "segmenting"
    Aggregating = "aggregating"
    Uploading = "uploading"
    Publishing = "publishing"
    Done = "done"
    Aborted = "aborted"


TaskFields = dict[str, str | int | None]


@dataclass(frozen=True)
class PreprocessResult:
    pdf_path: Path
    pdf_location: str
    page_count: int
    extension: str


@dataclass(frozen=True)
class PipelineResult:
    task_id: str
    page_count: int
    batch_count: int
    segment_count: int
    pdf_location: str
    output_location: str
