"""Configuration module -- exports Settings and load_settings."""

from studyflow.config.loader import load_settings
from studyflow.config.settings import Settings

__all__ = ["Settings", "load_settings"]
