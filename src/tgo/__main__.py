"""
tgo - Main entry point

Allows `python -m tgo ...`, delegating to cli.py.
"""

from .cli import cli

if __name__ == "__main__":
    cli()
