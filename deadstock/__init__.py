"""Pharmacy-to-pharmacy marketplace for near-expiry stock."""

__version__ = "0.1.0"
