"""Reference tree-walking evaluator for the rinha language."""

__version__ = "0.1.0"
