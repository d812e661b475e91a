"""Evaluator helper modules for the rinha runtime."""

__all__ = [
    "common",
    "control",
    "expr",
    "fn",
    "let",
    "literals",
]
