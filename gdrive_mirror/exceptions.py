"""
Defines custom exceptions for the application to allow for more specific error handling.

Startup errors (configuration, credentials) are fatal. Everything deriving from
`JobError` is scoped to a single identifier and is caught at the job boundary.
"""


class GdriveMirrorError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(GdriveMirrorError):
    """Raised for issues related to configuration loading or validation."""


class CredentialError(GdriveMirrorError):
    """Raised when no authenticated transport can be built from the credentials."""


class JobError(GdriveMirrorError):
    """Base exception for failures that only affect one identifier."""

    stage = "process file"

    def __init__(self, file_id: str, message: str):
        super().__init__(message)
        self.file_id = file_id


class MetadataFetchError(JobError):
    """Raised when the metadata of a file or folder cannot be retrieved."""

    stage = "retrieve file"


class PathResolutionError(JobError):
    """Raised when an ancestor lookup fails while building the folder path."""

    stage = "retrieve folder path"


class ContentDownloadError(JobError):
    """Raised when the content stream of a file cannot be opened or read."""

    stage = "download file"


class DirectoryCreateError(JobError):
    """Raised when the destination folder cannot be created."""

    stage = "create destination folder"


class FileWriteError(JobError):
    """Raised when the destination file cannot be created or written."""

    stage = "write file content"
