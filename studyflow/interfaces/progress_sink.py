"""Progress sink type used by the pipeline orchestrator.

A sink is any callable taking ``(message, percent_complete)``.  It may be a
plain function or a coroutine function; the orchestrator awaits the result
when it is awaitable.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Union

ProgressSink = Callable[[str, int], Union[Awaitable[None], None]]
