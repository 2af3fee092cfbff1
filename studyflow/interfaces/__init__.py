"""Public interface definitions for StudyFlow collaborators.

Every external service the pipeline depends on is accessed through the
abstract base classes defined in this package.  Concrete adapters are
injected at construction time, so unit tests can pass fakes or mocks.

CONCRETE PROVIDER MAP:
    Interface                  →  Concrete implementation
    ─────────────────────────────────────────────────────────────────────
    ITextSource                →  InMemoryTextSource
    IEmbeddingProvider         →  HashEmbeddingProvider
    ICacheProvider             →  MemoryCacheProvider
    IDocumentRepository        →  InMemoryDocumentRepository
    IStudyContentGenerator     →  StudyContentGenerator
    IEnrichmentService         →  WebEnrichmentService
    ILLMProvider               →  (caller supplied)
    IWebSearchProvider         →  (caller supplied)
"""

from studyflow.interfaces.cache_provider import ICacheProvider
from studyflow.interfaces.content_generator import IStudyContentGenerator
from studyflow.interfaces.document_repository import IDocumentRepository
from studyflow.interfaces.embedding_provider import IEmbeddingProvider
from studyflow.interfaces.enrichment_service import IEnrichmentService
from studyflow.interfaces.llm_provider import ILLMProvider
from studyflow.interfaces.progress_sink import ProgressSink
from studyflow.interfaces.text_source import ITextSource
from studyflow.interfaces.web_search_provider import IWebSearchProvider, SearchResult

__all__ = [
    "ICacheProvider",
    "IDocumentRepository",
    "IEmbeddingProvider",
    "IEnrichmentService",
    "ILLMProvider",
    "IStudyContentGenerator",
    "ITextSource",
    "IWebSearchProvider",
    "ProgressSink",
    "SearchResult",
]
