"""Use cases — one module per tool-level operation."""
