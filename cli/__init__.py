"""Resonance Engine command-line interface."""

__version__ = "2.0.0"
