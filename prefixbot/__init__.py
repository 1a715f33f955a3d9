"""Prefix-command dispatch and authorization engine for a Discord bot."""

__version__ = "1.0.0"
