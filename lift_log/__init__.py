"""Local strength-training workout log."""

__version__ = "0.1.0"
