"""Utility helpers for the REST back-end integration."""

from hb2b_rest.utils.sanitization import sanitize_url

__all__ = ["sanitize_url"]
