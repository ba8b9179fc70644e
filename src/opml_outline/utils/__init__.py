"""Utility helpers for opml_outline."""
