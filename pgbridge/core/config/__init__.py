"""Configuration loading (defaults → YAML file → environment)."""
