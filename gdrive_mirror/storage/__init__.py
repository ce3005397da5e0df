"""
Storage Layer.

This package handles everything written to the local disk: the mirrored files
themselves and the configuration file.
"""

from .config_manager import ConfigManager
from .materializer import LocalMaterializer

__all__ = ["ConfigManager", "LocalMaterializer"]
