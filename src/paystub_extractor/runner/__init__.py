"""
CLI runner module.

Provides commands:
- extract: Extract paystub records from local files
- check: Show service capabilities (OCR availability, cache)
- init-config: Write a default configuration file
"""

from .main import create_cli, main

__all__ = [
    "create_cli",
    "main",
]
