"""
API Module

Entry points that connect the extraction pipeline to its concrete
collaborators and to the extraction queue.

Functions
---------
build_pipeline(config, queue)
    Builds an ExtractionPipeline backed by postgres, s3, libreoffice and
    the layout analysis service.

enqueue_extraction(queue, config, data)
    Validates an extraction payload and enqueues it for the workers.
"""

from .extract import build_pipeline, enqueue_extraction
