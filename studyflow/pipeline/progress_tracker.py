"""Pipeline progress tracking with callback-based listener notification.

Stores the latest :class:`~studyflow.models.pipeline.ProcessingProgress`
checkpoint for each document and broadcasts updates to listener callbacks
registered for that document.  Listeners are keyed by document id so
several pipeline runs can be observed without cross-talk.

Listener errors are caught and logged, and both sync and async callbacks
are supported.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from studyflow.models.pipeline import ProcessingProgress
from studyflow.utils.logging import get_logger


class ProgressTracker:
    """Tracks and broadcasts per-document pipeline progress.

    Use :meth:`sink_for` to obtain a progress sink that can be passed
    straight to
    :meth:`~studyflow.pipeline.orchestrator.StudyFlowPipeline.process_document`.
    """

    def __init__(self) -> None:
        self._snapshots: dict[str, ProcessingProgress] = {}
        self._listeners: dict[str, list[Callable]] = {}
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def update(self, document_id: str, message: str, percent_complete: int) -> None:
        """Record a checkpoint and notify the document's listeners.

        Parameters
        ----------
        document_id:
            The document being processed.
        message:
            Human-readable status message.
        percent_complete:
            Completion percentage, clamped to 0–100.
        """
        percent = max(0, min(100, int(percent_complete)))
        snapshot = ProcessingProgress(message=message, percent_complete=percent)
        self._snapshots[document_id] = snapshot

        self._logger.debug(
            "progress_update",
            document_id=document_id,
            percent=percent,
            message=message,
        )
        await self._notify_listeners(document_id, snapshot)

    def sink_for(self, document_id: str) -> Callable[[str, int], Awaitable[None]]:
        """Return a ``(message, percent)`` progress sink bound to *document_id*."""

        async def _sink(message: str, percent_complete: int) -> None:
            await self.update(document_id, message, percent_complete)

        return _sink

    def register_listener(self, document_id: str, callback: Callable) -> None:
        """Register *callback* for updates about *document_id*.

        The callback receives ``(document_id, progress)`` and may be sync or
        async.  Registering the same callback twice has no effect.
        """
        listeners = self._listeners.setdefault(document_id, [])
        if callback not in listeners:
            listeners.append(callback)
            self._logger.debug(
                "listener_registered",
                document_id=document_id,
                total_listeners=len(listeners),
            )

    def unregister_listener(self, document_id: str, callback: Callable) -> None:
        listeners = self._listeners.get(document_id, [])
        if callback in listeners:
            listeners.remove(callback)
            self._logger.debug(
                "listener_unregistered",
                document_id=document_id,
                remaining_listeners=len(listeners),
            )

    def get_progress(self, document_id: str) -> ProcessingProgress | None:
        """Return the latest checkpoint for *document_id*, if any."""
        return self._snapshots.get(document_id)

    def clear(self, document_id: str) -> None:
        """Forget the snapshot and listeners of *document_id*."""
        self._snapshots.pop(document_id, None)
        self._listeners.pop(document_id, None)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _notify_listeners(self, document_id: str, snapshot: ProcessingProgress) -> None:
        """Invoke the document's listeners; failing listeners are skipped."""
        for callback in list(self._listeners.get(document_id, [])):
            try:
                result = callback(document_id, snapshot)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as exc:
                self._logger.warning(
                    "listener_callback_error",
                    document_id=document_id,
                    error=str(exc),
                    callback=getattr(callback, "__name__", repr(callback)),
                )
