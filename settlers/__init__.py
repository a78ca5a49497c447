"""Settlers server: saved games and server feature negotiation."""

__version__ = "2.3.0"
