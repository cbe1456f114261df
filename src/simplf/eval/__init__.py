"""Evaluator helper modules for the Simplf runtime."""

__all__ = [
    "blocks",
    "common",
    "expr",
    "fn",
    "helpers",
    "loops",
]
