#!/usr/bin/env python3
"""
CLI entry point for the vacation rental Gmail integration.
"""
import sys
import os

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from src.main import main

if __name__ == "__main__":
    main()
