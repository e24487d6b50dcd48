"""Headless multi-cursor editing engine with Vim-style commands."""

__all__ = [
    "actions",
    "buffer",
    "commands",
    "cursors",
    "engine",
    "runtime",
]

__version__ = "0.1.0"
