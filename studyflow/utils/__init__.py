"""Utility modules for StudyFlow.

- **errors** -- Domain exception hierarchy rooted at StudyFlowError; each
  collaborator concern raises its own subclass so callers can handle
  failures granularly.
- **concurrency** -- semaphore-bounded fan-out used for chunk embedding.
- **logging** -- structlog setup with console output in development and
  structured JSON in production.
"""

from studyflow.utils.concurrency import first_exception, throttled_gather
from studyflow.utils.errors import (
    ConfigurationError,
    ContentGenerationError,
    DocumentNotFoundError,
    EmbeddingError,
    EnrichmentError,
    InvalidInputError,
    LLMError,
    PipelineCancelledError,
    PipelineError,
    StudyFlowError,
    TextNotAvailableError,
)
from studyflow.utils.logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "ContentGenerationError",
    "DocumentNotFoundError",
    "EmbeddingError",
    "EnrichmentError",
    "InvalidInputError",
    "LLMError",
    "PipelineCancelledError",
    "PipelineError",
    "StudyFlowError",
    "TextNotAvailableError",
    "configure_logging",
    "first_exception",
    "get_logger",
    "throttled_gather",
]
