"""Command line interface for jsondelta."""

from deltapack.cli.app import app, main

__all__ = ["app", "main"]
