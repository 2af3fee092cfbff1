"""Concrete adapters for StudyFlow interfaces."""
