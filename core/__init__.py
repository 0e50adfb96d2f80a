"""
Core Extraction Pipeline

This module provides the pipeline that turns one queued task into a
normalized pdf, a document-wide list of layout segments and a handoff
message for the OCR stage.

Classes
-------
ExtractionPipeline
    Runs the preprocessing, splitting, segmentation, aggregation, upload
    and publish stages for one queue envelope.

TaskStatusTracker
    Validated status updates for one task row.

Functions
---------
aggregate_segments(batches, batch_size)
    Offsets per-batch segments into document-wide page numbers.
"""

from .aggregation import aggregate_segments
from .pipeline import ExtractionPipeline
from .preprocess import preprocess
from .status import TaskStatusTracker
