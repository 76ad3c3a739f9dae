"""Frontend end-to-end tests."""
