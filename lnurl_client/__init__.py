"""LNURL client for a Core Lightning node."""

__version__ = "0.1.0"
