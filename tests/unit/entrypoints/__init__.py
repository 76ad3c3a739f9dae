"""Unit tests for the command-line entry points."""
