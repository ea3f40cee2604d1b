"""Session snapshot loading."""

from evalboard.loader.loader import SessionLoader

__all__ = ["SessionLoader"]
