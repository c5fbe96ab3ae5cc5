"""
Main entry point when running the package with `python -m zshell`
"""

import sys
from .cli import main

if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\nExiting.")
        sys.exit(0)
