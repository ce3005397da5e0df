"""
Data Models Layer.

This package contains the data structures used throughout the application:
the validated configuration, remote item snapshots and session statistics.
"""

from .config import MirrorConfig
from .item import RemoteItem, ResolvedPath
from .stats import MirrorStats

__all__ = ["MirrorConfig", "MirrorStats", "RemoteItem", "ResolvedPath"]
