#!/usr/bin/env python3
"""
Convenience entry point for running meetsync directly.

Usage: python meetsync.py [command] [options]
"""

from meetsync.cli.app import app

if __name__ == "__main__":
    app()
