"""Merging t-digest with CDF, quantile and trimmed-mean estimates, plus an example program."""

__version__ = "0.1.0"
__all__ = ["digest", "estimates", "example"]