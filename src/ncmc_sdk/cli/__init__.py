"""
NCMC SDK Command-Line Interface
===============================

- **ncmc**: decode, verify and generate CSA/OSA blocks

Implemented as a Click command group.
"""

__all__ = ["ncmc"]
