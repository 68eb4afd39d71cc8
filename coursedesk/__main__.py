"""
Entry point for running coursedesk as a module.

Usage:
    python -m coursedesk courses
    python -m coursedesk --help
"""
from .cli.main import main

if __name__ == "__main__":
    main()
