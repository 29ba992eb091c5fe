"""Ephemeral file sharing: short-code links with expiry, password and download limits."""

__version__ = "1.0.0"
