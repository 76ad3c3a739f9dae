"""End-to-end tests.

Purpose
- Drive the installed command-line interface the way a user or CI job would.

Guidelines
- Invoke commands through Click's CliRunner inside an isolated filesystem.
- Assert exit codes and user-visible output, not internals.
"""
