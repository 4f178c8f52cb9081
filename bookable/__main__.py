"""
Convenience entry point for running bookable directly.

Usage: python -m bookable [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
