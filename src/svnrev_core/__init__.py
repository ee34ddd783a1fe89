"""Core types and adapters for summarizing Subversion working copies."""

__version__ = "0.1.0"
