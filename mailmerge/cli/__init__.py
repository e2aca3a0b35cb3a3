from .__main__ import EXIT_FATAL, EXIT_SUCCESS, KEY_BINDINGS, main

__all__ = [
    "main",
    "EXIT_SUCCESS",
    "EXIT_FATAL",
    "KEY_BINDINGS",
]
