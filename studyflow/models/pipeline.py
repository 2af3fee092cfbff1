"""Pipeline progress model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProcessingProgress(BaseModel):
    """One progress checkpoint reported while a document is processed."""

    model_config = ConfigDict(frozen=True)

    message: str
    percent_complete: int = Field(ge=0, le=100)
