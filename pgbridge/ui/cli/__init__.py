"""CLI command groups registered by ``pgbridge.main``."""
