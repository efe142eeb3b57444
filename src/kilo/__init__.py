# src/kilo/__init__.py
"""kilo: terminal-control and rendering core of a minimal text display program."""

__version__ = "0.1.0"
