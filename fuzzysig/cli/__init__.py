"""
Command line interface for fuzzysig.

Validates engine configurations and scores instruments from CSV price files.
"""

from fuzzysig.cli.app import app

__all__ = ["app"]
