"""Atlas Generator conversion queue."""

__version__ = "0.1.0"
