"""prepflow: preprocessing configuration and batch submission for tabular datasets."""

__version__ = "0.1.0"
