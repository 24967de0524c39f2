"""
Entry point for running the CLI as a module.

Usage:
    python -m limba_insights.cli grammar chain past_tense
    python -m limba_insights.cli --help
"""
from .main import main

if __name__ == "__main__":
    main()
