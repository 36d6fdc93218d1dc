"""
Main entry point for running the package as a module.

Uses the Click-based CLI from opencode_sync/cli/.
"""
import sys

from opencode_sync.cli import main

if __name__ == "__main__":
    sys.exit(main())
