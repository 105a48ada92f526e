#!/usr/bin/env python3
"""Run the HitBTC order-book tracker."""

import sys

from src.tracker.cli import main

if __name__ == "__main__":
    sys.exit(main())
