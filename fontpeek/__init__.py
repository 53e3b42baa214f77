"""Fontpeek: browse installed fonts and preview them."""

__version__ = "0.1.0"
