"""API client for togglPy."""

from .client import TogglClient

__all__ = ['TogglClient']
