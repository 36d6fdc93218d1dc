"""Sync OpenCode conversations between machines and import other chat archives."""

__version__ = "0.1.0"
