"""Block-height gated migration registry."""

__version__ = "0.1.0"
