"""Car rental reservation platform."""

__version__ = "0.1.0"
