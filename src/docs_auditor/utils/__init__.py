"""Utility helpers for docs-auditor."""

from .text import titleize

__all__ = ["titleize"]
