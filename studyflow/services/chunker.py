"""Heading-aware text chunking with size bounds.

Splits extracted document text into :class:`~studyflow.models.document.DocumentChunk`
objects whose content length lies between ``min_chunk_size`` and
``max_chunk_size`` characters.

The chunking strategy works in two phases:

1. **Section split** -- lines that look like headings (markdown ``#``
   headings, short capitalised lines ending with a colon, numbered
   headings such as ``"2. Methods"``) start a new section.  Every other
   line is body text of the current section.

2. **Size normalisation** -- oversized sections are split at sentence
   boundaries, sections within bounds become one chunk, and sections
   shorter than the minimum are dropped.

Chunk ids are derived from the document id, the chunk index and the chunk
content, so chunking the same text twice yields the same chunk sequence.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass

import structlog

from studyflow.models.document import DocumentChunk
from studyflow.utils.errors import InvalidInputError

logger = structlog.get_logger(logger_name=__name__)

_HEADING_RE = re.compile(
    r"^(#{1,6}\s+.+|[A-Z][^.!?]*:\s*$|\d+\.\s+[A-Z].+$)"
)
# Colon-terminated headings longer than this are treated as body text.
_MAX_COLON_HEADING_LEN = 80

_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+")

_CHUNK_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "studyflow/chunks")


@dataclass
class _Section:
    heading: str | None
    content: str


class SectionChunker:
    """Splits text into heading-tagged chunks within size bounds.

    Parameters
    ----------
    min_chunk_size:
        Minimum chunk length in characters (default 300).  Sections shorter
        than this are dropped; only the final piece of a split section may
        fall below it.
    max_chunk_size:
        Maximum chunk length in characters (default 800).  A single sentence
        longer than this cannot be split further and is emitted as is.

    Raises
    ------
    InvalidInputError
        If ``min_chunk_size < 1`` or ``max_chunk_size < min_chunk_size``.
    """

    def __init__(self, min_chunk_size: int = 300, max_chunk_size: int = 800) -> None:
        if min_chunk_size < 1 or max_chunk_size < min_chunk_size:
            raise InvalidInputError(
                message=(
                    f"Invalid chunk bounds: min={min_chunk_size}, max={max_chunk_size}"
                )
            )
        self._min = min_chunk_size
        self._max = max_chunk_size

    @property
    def min_chunk_size(self) -> int:
        return self._min

    @property
    def max_chunk_size(self) -> int:
        return self._max

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def chunk(self, text: str, document_id: str = "") -> list[DocumentChunk]:
        """Split *text* into ordered :class:`DocumentChunk` objects.

        Parameters
        ----------
        text:
            The full extracted text of a document.
        document_id:
            Identifier copied into every chunk and mixed into chunk ids.

        Returns
        -------
        list[DocumentChunk]
            Chunks with contiguous 0-based indices.  Empty or whitespace-only
            input returns an empty list.
        """
        if not text or not text.strip():
            return []

        sections = self._split_sections(text)

        chunks: list[DocumentChunk] = []
        cursor = 0
        for section_index, section in enumerate(sections):
            if len(section.content) > self._max:
                pieces = self._split_large_section(section.content)
            elif len(section.content) >= self._min:
                pieces = [section.content]
            else:
                logger.debug(
                    "section_dropped",
                    document_id=document_id,
                    section_index=section_index,
                    length=len(section.content),
                )
                continue

            for part, piece in enumerate(pieces, start=1):
                index = len(chunks)
                chunks.append(
                    DocumentChunk(
                        id=self._chunk_id(document_id, index, piece),
                        document_id=document_id,
                        index=index,
                        content=piece,
                        start_offset=cursor,
                        end_offset=cursor + len(piece),
                        page_number=0,
                        heading=section.heading,
                        metadata={
                            "section_index": str(section_index),
                            "part": f"{part}/{len(pieces)}",
                        },
                    )
                )
                cursor += len(piece)

        logger.debug(
            "chunking_complete",
            document_id=document_id,
            num_sections=len(sections),
            num_chunks=len(chunks),
        )
        return chunks

    # ------------------------------------------------------------------
    # Section / sentence splitting
    # ------------------------------------------------------------------

    @staticmethod
    def is_heading(line: str) -> bool:
        """Return ``True`` if the stripped *line* starts a new section."""
        candidate = line.strip()
        if not _HEADING_RE.match(candidate):
            return False
        if candidate.startswith("#") or candidate[0].isdigit():
            return True
        return len(candidate) <= _MAX_COLON_HEADING_LEN

    def _split_sections(self, text: str) -> list[_Section]:
        """Group lines under the heading that precedes them.

        Sections whose body is blank after stripping are discarded; a
        heading immediately followed by another heading is therefore lost.
        """
        sections: list[_Section] = []
        heading: str | None = None
        body: list[str] = []

        for line in text.split("\n"):
            if self.is_heading(line):
                content = "\n".join(body).strip()
                if content:
                    sections.append(_Section(heading=heading, content=content))
                body = []
                heading = line.strip()
            else:
                body.append(line)

        content = "\n".join(body).strip()
        if content:
            sections.append(_Section(heading=heading, content=content))
        return sections

    def _split_large_section(self, text: str) -> list[str]:
        """Split an oversized section at sentence boundaries.

        Sentences accumulate into the current piece, joined by single
        spaces.  A piece is emitted when adding the next sentence would
        exceed the maximum and the piece already exceeds the minimum, so
        every emitted piece except the last is at least ``min_chunk_size``.
        A piece still at or below the minimum always takes the next
        sentence, so it can pass the maximum even when no single sentence
        does.
        """
        pieces: list[str] = []
        current: list[str] = []
        # Length of the piece including one trailing space per sentence.
        current_len = 0

        for sentence in _SENTENCE_SPLIT_RE.split(text):
            if current_len + len(sentence) > self._max and current_len > self._min:
                pieces.append(" ".join(current))
                current = []
                current_len = 0
            current.append(sentence)
            current_len += len(sentence) + 1

        if current:
            tail = " ".join(current).strip()
            if tail:
                pieces.append(tail)
        return pieces

    @staticmethod
    def _chunk_id(document_id: str, index: int, content: str) -> str:
        return str(uuid.uuid5(_CHUNK_NAMESPACE, f"{document_id}\x1f{index}\x1f{content}"))
