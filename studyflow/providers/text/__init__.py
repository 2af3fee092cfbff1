"""Text source implementations."""

from studyflow.providers.text.memory_text_source import InMemoryTextSource

__all__ = ["InMemoryTextSource"]
