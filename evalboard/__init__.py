"""Evalboard - analytics engine for video evaluation sessions."""

__version__ = "1.0.0"
