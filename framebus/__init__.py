"""Simulated master/slave memory bus with CRC-16 framing, and a search-tree command runner."""

__version__ = "0.1.0"
__all__ = ["__version__"]