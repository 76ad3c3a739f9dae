"""Unit tests for the CLI helpers."""
