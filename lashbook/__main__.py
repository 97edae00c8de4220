"""
Convenience entry point for running lashbook as a module.

Usage: python -m lashbook [command] [options]
"""

from lashbook.cli.app import app

if __name__ == "__main__":
    app()
