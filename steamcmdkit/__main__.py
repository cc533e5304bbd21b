"""
Entry point for running steamcmdkit CLI as a module.

Usage: python -m steamcmdkit [command] [options]
"""

from steamcmdkit.cli.parser import main

if __name__ == "__main__":
    main()
