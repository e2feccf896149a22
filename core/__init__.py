"""Shared paths, settings and logging helpers."""
