#!/usr/bin/env python3
"""
MockAPI - mock endpoints with validation, error scenarios and dynamic data

This is a convenience wrapper that calls the modular implementation.
The actual implementation is in src/mockapi/cli.py

Usage:
    python mockapi-server.py serve endpoints.yaml --port 8080

For more information, see README.md
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from mockapi.cli import main

if __name__ == '__main__':
    main()
