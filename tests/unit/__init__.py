"""Unit tests.

Purpose
- Verify a single module/class/function in isolation.

Guidelines
- No real I/O beyond pytest's ``tmp_path``; no sleeping except in concurrency tests.
- Prefer behavior-centric assertions over implementation details.
- Keep tests small, fast, and deterministic.
"""
