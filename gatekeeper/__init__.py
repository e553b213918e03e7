"""Gatekeeper — gate-access registry of permitted license plates."""

__version__ = "1.0.0"
