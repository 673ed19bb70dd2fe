"""
Package entry point for python -m execution.

USAGE:
    python -m zone01_profile login      # Sign in and store the session
    python -m zone01_profile report     # Print profile summary
    python -m zone01_profile dashboard  # Launch web dashboard
"""

import sys

from zone01_profile.cli import main

if __name__ == "__main__":
    sys.exit(main())
