"""StudyFlow: turn long-form documents into chunked, searchable study material
with spaced-repetition review sessions."""

__version__ = "0.1.0"
