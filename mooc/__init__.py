"""Moo compiler front end."""

__version__ = "0.1.0"
