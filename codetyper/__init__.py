"""Typing practice on words sampled from your own source code."""

__version__ = "0.4.0"
