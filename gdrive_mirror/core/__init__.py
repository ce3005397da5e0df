"""
Core application engine for orchestrating the mirror process.

This package contains the primary logic. The `MirrorManager` acts as the
high-level session coordinator, delegating each identifier to the
`FileProcessor`, which in turn uses the `PathResolver` to rebuild the remote
folder path.
"""
