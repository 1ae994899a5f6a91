"""
Entry point for running Prompta as a module.

This allows users to run the CLI using:
    python -m prompta [command] [options]
"""

from prompta.cli.app import main

if __name__ == "__main__":
    main()
