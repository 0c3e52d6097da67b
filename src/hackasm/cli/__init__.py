"""
hackasm Command-Line Interface
==============================

- **hackasm**: Hack assembler

Implemented as a Click-based CLI application with comprehensive help and
error reporting.
"""

__all__ = ["hackasm"]
