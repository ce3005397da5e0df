"""
Google Drive API Layer.

This package handles all communication with the Drive v3 API and the
credentials needed to authenticate against it.
"""

from .auth import DriveAuthenticator
from .client import DriveAPIClient
from .transport import RemoteTransport

__all__ = ["DriveAPIClient", "DriveAuthenticator", "RemoteTransport"]
