"""
Builds the local folder path of a Drive file from its chain of ancestors.
"""

import logging

from gdrive_mirror.api.transport import RemoteTransport
from gdrive_mirror.exceptions import MetadataFetchError, PathResolutionError
from gdrive_mirror.models.item import RemoteItem, ResolvedPath

log = logging.getLogger(__name__)


class PathResolver:
    """
    Walks first-parent links from an item up to the hierarchy root.

    Only the first parent of every item is followed. The walk has no cycle
    detection and no depth limit: a hierarchy whose parent links loop back on
    themselves makes `resolve` run forever.
    """

    def __init__(self, transport: RemoteTransport):
        self.transport = transport

    async def resolve(self, item: RemoteItem) -> ResolvedPath:
        """
        Returns the ancestor folder names of `item`, root first.

        An item without parents lives at the root and resolves to an empty path
        without any lookup. Otherwise every ancestor costs exactly one metadata
        request.

        Raises:
            PathResolutionError: If any ancestor lookup fails. No partial path
            is returned.
        """
        parent_id = item.first_parent
        parts: list[str] = []

        while parent_id is not None:
            try:
                parent = await self.transport.fetch_metadata(parent_id)
            except MetadataFetchError as e:
                raise PathResolutionError(
                    item.id, f"unable to retrieve parent folder '{parent_id}': {e}"
                ) from e
            parts.insert(0, parent.name)
            parent_id = parent.first_parent

        path = ResolvedPath(tuple(parts))
        log.debug(f"Resolved '{item.id}' to '{path}' ({len(parts)} ancestors).")
        return path
