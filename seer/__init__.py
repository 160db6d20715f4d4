"""Seer: discovers, scores and reports on product opportunities."""

__version__ = "0.1.0"
