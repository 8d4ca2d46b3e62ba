"""Configuration for the trade admission engine."""

from .settings import Settings

__all__ = ["Settings"]
