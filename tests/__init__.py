"""NULLGUARD test suite.

Folder taxonomy
- unit/      : Isolated, fast checks of a single module/class/function.
- contract/  : Observable guard behavior against the reference interfaces.
- e2e/       : The ``nullguard`` command driven through Click's CliRunner.
- fixtures/  : Shared reference interfaces and implementations (no tests here).

General guidance
- Keep unit fast and deterministic; build guards with a fresh `ContractCache`.
- Contract tests assert what callers and implementations observe, not internals.
- Property-based tests live with the layer they exercise and use @pytest.mark.property.
- Markers: unit, contract, e2e (applied by folder), property, concurrency
"""
