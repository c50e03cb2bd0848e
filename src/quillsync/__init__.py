"""Quillsync - document synchronization and quota enforcement service."""

__version__ = "0.1.0"
