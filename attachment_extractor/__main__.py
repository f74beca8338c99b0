#!/usr/bin/env python3
"""
Entry point for running attachment_extractor as a module.
This allows: python -m attachment_extractor <email_file>
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
