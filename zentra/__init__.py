"""Zentra Holdings landscaping site and admin back-office."""

__version__ = "0.1.0"
