#!/usr/bin/env python3
"""Convenience runner for the FitTracker workout tools.

Usage:
    python run.py validate workout.json
    python run.py stats points.json
"""
import sys

from fittracker.main import main

if __name__ == "__main__":
    sys.exit(main())
