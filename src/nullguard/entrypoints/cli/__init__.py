"""The ``nullguard`` command-line interface."""
