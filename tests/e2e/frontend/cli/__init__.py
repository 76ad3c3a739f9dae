"""End-to-end tests of the nullguard command."""
