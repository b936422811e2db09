"""Subversion operations for the release repository."""

from .client import SvnClient, SvnError, SvnStatusEntry

__all__ = [
    "SvnClient",
    "SvnError",
    "SvnStatusEntry",
]
