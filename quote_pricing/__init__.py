"""Pricing computation engine for enterprise quotes."""

__version__ = "0.1.0"
