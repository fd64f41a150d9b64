#!/usr/bin/env python3
"""Main entry point for LogSender."""

from logsender.app import main

if __name__ == "__main__":
    main()
