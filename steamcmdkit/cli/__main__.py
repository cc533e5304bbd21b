"""
Entry point for running steamcmdkit CLI as a module.

Usage: python -m steamcmdkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
