"""Custom exception hierarchy for StudyFlow.

All application exceptions inherit from :class:`StudyFlowError`, which
carries an optional ``provider_name`` so error handlers can identify which
collaborator (e.g. "openai", "duckduckgo", "hash-embedding") caused the
failure.

The hierarchy is organized by pipeline concern:

    StudyFlowError  (base -- catch-all for any StudyFlow error)
    +-- InvalidInputError        (rejected immediately, no partial effect)
    +-- TextNotAvailableError    (text source has no extracted text)
    +-- DocumentNotFoundError    (repository miss where a document is required)
    +-- EmbeddingError           (embedding provider / index failure)
    +-- ContentGenerationError   (concept / flashcard / question generation)
    +-- EnrichmentError          (web search enrichment)
    +-- LLMError                 (any LLM API call failure)
    +-- PipelineError            (orchestration failure, wraps the cause)
    |   +-- PipelineCancelledError
    +-- ConfigurationError       (startup / invalid settings)

Similarity-index read misses are not errors: querying an unindexed document
returns an empty result.
"""


class StudyFlowError(Exception):
    """Base exception for all StudyFlow errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which collaborator triggered the error.
    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[openai] Rate limit exceeded``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Input / lookup errors
# ---------------------------------------------------------------------------

class InvalidInputError(StudyFlowError):
    """Raised for caller errors: empty text, dimension mismatch, bad counts."""

    def __init__(
        self,
        message: str = "Invalid input",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class TextNotAvailableError(StudyFlowError):
    """Raised by a text source when no extracted text exists for a document."""

    def __init__(
        self,
        message: str = "Extracted text is not available",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class DocumentNotFoundError(StudyFlowError):
    """Raised when a document id is unknown to the repository."""

    def __init__(
        self,
        message: str = "Document not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Collaborator errors
# ---------------------------------------------------------------------------

class EmbeddingError(StudyFlowError):
    """Raised when generating or indexing embeddings fails."""

    def __init__(
        self,
        message: str = "Embedding generation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ContentGenerationError(StudyFlowError):
    """Raised when concepts or study items cannot be generated."""

    def __init__(
        self,
        message: str = "Study content generation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class EnrichmentError(StudyFlowError):
    """Raised when web enrichment (search, summarisation) fails."""

    def __init__(
        self,
        message: str = "Knowledge enrichment failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class LLMError(StudyFlowError):
    """Raised when an LLM API call fails or returns an unparseable response."""

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Orchestration / configuration errors
# ---------------------------------------------------------------------------

class PipelineError(StudyFlowError):
    """Raised when a pipeline step fails; the step's exception is the ``__cause__``."""

    def __init__(
        self,
        message: str = "Pipeline orchestration failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class PipelineCancelledError(PipelineError):
    """Raised when a pipeline run is cancelled before its next step starts."""

    def __init__(
        self,
        message: str = "Pipeline run was cancelled",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(StudyFlowError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
