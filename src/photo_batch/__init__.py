"""Batch image transform pipeline: resize, tone, re-encode and archive."""

__version__ = "0.1.0"
