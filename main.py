#!/usr/bin/env python3
"""
Main entry point for the session refresh coordinator
"""

from session_refresh.main import run

if __name__ == "__main__":
    run()
