#!/usr/bin/env python3
"""Web server entry point for Debatcoach AI."""

from main import start_web_server

if __name__ == "__main__":
    start_web_server()
