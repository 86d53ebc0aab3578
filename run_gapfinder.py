#!/usr/bin/env python3
"""
Convenience entry point for running gapfinder directly.

Usage: python run_gapfinder.py [command] [options]
"""

from gapfinder.cli.app import app

if __name__ == "__main__":
    app()
