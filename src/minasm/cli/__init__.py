"""
Minasm Command-Line Interface
=============================

This package provides the ``minasm`` command-line tool, a Click-based
front end that reads a source file, assembles it and writes the object,
listing and error files.
"""

__all__ = ["minasm"]
