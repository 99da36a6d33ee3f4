"""Chunked peer-to-peer file sharing: file chunking and swarm transfer state."""

__version__ = "0.1.0"

__all__ = ["chunks", "swarm"]