"""Unit tests for guard class synthesis."""
