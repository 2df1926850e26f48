"""
Convenience entry point for running clinic_schedule directly.

Usage: python -m clinic_schedule [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
