"""Mirror Google Drive files, read by id from stdin, into a local folder tree."""

__version__ = "0.1.0"
