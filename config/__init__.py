"""
Configuration

Environment-derived settings for the extraction worker. Module-level
defaults live in `settings`; `ExtractionConfig.from_env()` builds the
immutable configuration passed to the pipeline and workers.
"""

from .extraction_config import ExtractionConfig
