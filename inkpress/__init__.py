"""Static blog generator with image link post-processing."""

__version__ = "0.1.0"
