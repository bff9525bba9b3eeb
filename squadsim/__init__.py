"""Deterministic tick-based squad combat simulator."""

__version__ = "0.1.0"
