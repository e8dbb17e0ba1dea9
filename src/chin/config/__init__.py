"""Configuration management."""

from .config import ChinConfig

__all__ = ["ChinConfig"]
