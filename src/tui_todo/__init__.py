"""TUI Todo - a vi-style terminal todo list."""

__version__ = "0.1.0"
