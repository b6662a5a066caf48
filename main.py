#!/usr/bin/env python3
"""
gitdesk - git desktop client with a commit graph

This is a convenience wrapper for running from the repo root.
The actual entry point is gitdesk.main:main (for pip install).
"""

from gitdesk.main import main

if __name__ == "__main__":
    main()
