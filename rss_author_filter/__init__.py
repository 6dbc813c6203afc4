"""Author-based filtering proxy for a single RSS feed."""

__version__ = "1.0.0"
