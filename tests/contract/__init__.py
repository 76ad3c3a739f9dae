"""Contract tests.

Purpose
- Assert the observable behavior of guards built for reference interfaces:
  what is rejected, when, and what reaches the inner implementation.

Guidelines
- Build guards through the public API (`guard`, `prepare`) with a fresh cache.
- Assert only the public contract (inputs/outputs/effects), not internals.
- Pair every violation test with the compliant call it mirrors.
"""
