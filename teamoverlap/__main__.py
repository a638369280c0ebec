"""
Convenience entry point for running teamoverlap directly.

Usage: python -m teamoverlap [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
