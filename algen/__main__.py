"""
Entry point for running algen as a module.

Usage:
    python -m algen generate program.json -o program.al
"""

import sys
from .cli import main

if __name__ == "__main__":
    sys.exit(main())
