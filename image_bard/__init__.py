"""Turn a picture into a poem."""

__version__ = "0.1.0"
