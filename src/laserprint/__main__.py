#!/usr/bin/env python3
"""
LaserPrint Main Entry Point

Allows running the reveal simulator via: python -m laserprint
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
