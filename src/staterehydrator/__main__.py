"""
Main entry point for running StateRehydrator as a module.

Usage:
    python -m staterehydrator [COMMAND] [OPTIONS]
"""

from .cli import main

if __name__ == "__main__":
    main()
