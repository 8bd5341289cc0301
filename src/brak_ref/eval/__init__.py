"""Evaluator helper modules for the Brak runtime."""

__all__ = [
    "control",
    "expr",
    "fn",
    "helpers",
]
