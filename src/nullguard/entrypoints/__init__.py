"""Entrypoints (outer surfaces) for NULLGUARD."""
