"""Configuration module for typed-kv."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
