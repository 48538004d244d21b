"""Utility helpers for the nightcore package."""

from .logging import configure_logging

__all__ = ["configure_logging"]
