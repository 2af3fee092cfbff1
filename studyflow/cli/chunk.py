"""Chunk (and optionally search) a plain-text document from the shell.

Usage::

    python -m studyflow.cli chunk notes.md --min 300 --max 800
    python -m studyflow.cli chunk notes.md --json
    python -m studyflow.cli search notes.md "cell respiration" --top-k 3

Chunk bounds default to the resolved settings (``config/config.yaml``
overlaid with environment variables).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from studyflow.config.loader import DEFAULT_CONFIG_PATH, load_settings
from studyflow.config.settings import Settings
from studyflow.models.document import DocumentChunk
from studyflow.providers.embedding.hash_embedding_provider import HashEmbeddingProvider
from studyflow.services.chunker import SectionChunker
from studyflow.services.embedding_service import EmbeddingService
from studyflow.services.similarity_index import SimilarityIndex
from studyflow.utils.errors import StudyFlowError
from studyflow.utils.logging import configure_logging

_PREVIEW_CHARS = 60


def _read_text(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def _build_chunker(args: argparse.Namespace, app_settings: Settings) -> SectionChunker:
    return SectionChunker(
        min_chunk_size=args.min if args.min is not None else app_settings.min_chunk_size,
        max_chunk_size=args.max if args.max is not None else app_settings.max_chunk_size,
    )


def _preview(content: str) -> str:
    flat = " ".join(content.split())
    if len(flat) > _PREVIEW_CHARS:
        return flat[: _PREVIEW_CHARS - 3] + "..."
    return flat


def _print_table(chunks: list[DocumentChunk]) -> None:
    print(f"{'#':>4}  {'chars':>6}  {'offsets':>13}  {'part':>5}  heading / preview")
    print("-" * 78)
    for chunk in chunks:
        offsets = f"{chunk.start_offset}-{chunk.end_offset}"
        print(
            f"{chunk.index:>4}  {len(chunk.content):>6}  {offsets:>13}  "
            f"{chunk.metadata.get('part', ''):>5}  {chunk.heading or '(no heading)'}"
        )
        print(f"{'':>34}{_preview(chunk.content)}")
    print(f"\n{len(chunks)} chunk(s)")


def _handle_chunk(args: argparse.Namespace, app_settings: Settings) -> int:
    chunker = _build_chunker(args, app_settings)
    document_id = Path(args.file).stem
    chunks = chunker.chunk(_read_text(args.file), document_id=document_id)

    if args.json:
        payload = [c.model_dump(mode="json", exclude={"embedding"}) for c in chunks]
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        _print_table(chunks)
    return 0


async def _handle_search(args: argparse.Namespace, app_settings: Settings) -> int:
    chunker = _build_chunker(args, app_settings)
    document_id = Path(args.file).stem
    chunks = chunker.chunk(_read_text(args.file), document_id=document_id)

    service = EmbeddingService(
        provider=HashEmbeddingProvider(dimension=app_settings.embedding_dimension),
        index=SimilarityIndex(),
        concurrency=app_settings.embedding_concurrency,
    )
    await service.embed_chunks(document_id, chunks)
    top_k = args.top_k if args.top_k is not None else app_settings.retrieval_top_k
    results = await service.search_scored(document_id, args.query, top_k=top_k)

    if args.json:
        payload = [
            {
                "index": r.chunk.index,
                "similarity": round(r.similarity, 6),
                "heading": r.chunk.heading,
                "content": r.chunk.content,
            }
            for r in results
        ]
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    print(f"Top {len(results)} of {len(chunks)} chunk(s) for: {args.query}")
    for rank, result in enumerate(results, start=1):
        print(
            f"{rank:>3}. [{result.similarity:+.4f}] #{result.chunk.index} "
            f"{result.chunk.heading or '(no heading)'}"
        )
        print(f"      {_preview(result.chunk.content)}")
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="Path to a UTF-8 plain-text or markdown file")
    parser.add_argument("--min", type=int, default=None, help="Minimum chunk size in characters")
    parser.add_argument("--max", type=int, default=None, help="Maximum chunk size in characters")
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"YAML config file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the StudyFlow CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m studyflow.cli",
        description="Chunk and search study documents.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # -- chunk --
    chunk_parser = subparsers.add_parser("chunk", help="Split a text file into chunks")
    _add_common_arguments(chunk_parser)

    # -- search --
    search_parser = subparsers.add_parser(
        "search", help="Rank a text file's chunks against a query"
    )
    _add_common_arguments(search_parser)
    search_parser.add_argument("query", help="Search query text")
    search_parser.add_argument("--top-k", type=int, default=None, dest="top_k")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point; returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        app_settings = load_settings(args.config)
        configure_logging(log_level="WARNING", json_output=False)
        if args.command == "chunk":
            return _handle_chunk(args, app_settings)
        return asyncio.run(_handle_search(args, app_settings))
    except OSError as exc:
        print(f"Error: cannot read {args.file}: {exc}", file=sys.stderr)
        return 1
    except StudyFlowError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
