#!/usr/bin/env python3
"""
srtdelay Entry Point Script

This script initializes the CLI handler and shifts the given subtitle files.
"""

import sys
from srtdelay.cli import CLIHandler

if __name__ == "__main__":
    if sys.version_info < (3, 8):
        sys.stderr.write("srtdelay requires Python 3.8 or later.\n")
        sys.exit(1)

    cli = CLIHandler()
    cli.run()
