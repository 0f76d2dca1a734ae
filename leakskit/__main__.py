"""
Entry point for running leakskit as a module.

Usage: python -m leakskit [command] [options]
"""

from leakskit.cli.parser import main

if __name__ == "__main__":
    main()
