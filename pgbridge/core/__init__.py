"""Core — channel-independent models, services and use cases."""
