"""
Type Definitions

Shared enums, queue payload models and segment models used across the
extraction worker.
"""

from .shared import (
    Status,
    PipelineStage,
    PreprocessResult,
    PipelineResult,
    TaskFields,
    TERMINAL_STATUSES,
)
from .payloads import ExtractionPayload, QueuePayload, ProducePayload
from .segments import Segment, PdlaSegment, SegmentType
