"""Application settings loaded from environment variables via pydantic-settings.

Settings are read from two sources, in priority order:

  1. Environment variables, e.g. ``MAX_CHUNK_SIZE=1000``
  2. A ``.env`` file in the working directory

Field names map to upper-cased environment variables.  Defaults apply when
neither source sets a value.  :func:`studyflow.config.loader.load_settings`
adds ``config/config.yaml`` as a third, lowest-priority layer.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """StudyFlow settings.

    Environment variables override defaults.  Loaded from .env when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Chunking ===
    min_chunk_size: int = Field(default=300, ge=1)
    max_chunk_size: int = Field(default=800, ge=1)

    # === Retrieval ===
    retrieval_top_k: int = Field(default=5, ge=1)
    embedding_dimension: int = Field(default=1536, ge=1)
    embedding_concurrency: int = Field(default=4, ge=1)
    query_cache_size: int = Field(default=256, ge=1)
    query_cache_ttl: int = Field(default=3600, ge=1)  # seconds

    # === Study sessions ===
    default_session_size: int = Field(default=20, ge=1)

    # === Content generation / enrichment ===
    concept_prompt_max_chars: int = Field(default=12000, ge=1)
    enrichment_max_concepts: int = Field(default=5, ge=0)
    enrichment_max_topics: int = Field(default=3, ge=0)
    enrichment_results_per_query: int = Field(default=3, ge=1)

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _check_chunk_bounds(self) -> "Settings":
        if self.max_chunk_size < self.min_chunk_size:
            raise ValueError(
                f"max_chunk_size ({self.max_chunk_size}) must not be smaller than "
                f"min_chunk_size ({self.min_chunk_size})"
            )
        return self

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"
