"""
Entry point for running the leakskit CLI as a module.

Usage: python -m leakskit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
