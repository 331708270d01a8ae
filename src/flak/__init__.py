"""Flak barrage engine for flight-simulation missions."""

__version__ = "1.1.0"
