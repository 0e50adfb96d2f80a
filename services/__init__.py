"""
Extraction Services

This module launches worker processes that consume the extraction queue
and run each task through the extraction pipeline.

Functions
---------
start_extraction_workers(config, workers)
    Starts extraction worker processes.

handle_queue_item(pipeline, queue, item)
    Processes one queue envelope, redelivering it on failure.
"""

from .extraction_workers import (
    start_extraction_workers,
    extraction_worker,
    handle_queue_item,
)
