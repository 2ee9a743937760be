"""Structural JSON comparison and annotated rendering."""

__version__ = "0.1.0"
