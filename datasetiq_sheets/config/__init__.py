"""Configuration."""

from .settings import Settings, SOURCES, free_tier_notice

__all__ = ["Settings", "SOURCES", "free_tier_notice"]
