"""Xaheen - project scaffolding CLI with fuzzy command routing."""

__version__ = "0.4.0"
