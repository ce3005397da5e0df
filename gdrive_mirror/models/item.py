"""
Data models for remote Drive items and the folder paths derived from them.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class RemoteItem:
    """An immutable snapshot of a Drive file or folder."""

    id: str
    name: str
    parents: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def first_parent(self) -> Optional[str]:
        """The only parent the hierarchy walk ever follows."""
        return self.parents[0] if self.parents else None

    @classmethod
    def from_api(cls, file_id: str, payload: Dict[str, Any]) -> "RemoteItem":
        """Builds an item from a `files.get` response limited to `name,parents`."""
        return cls(
            id=file_id,
            name=payload.get("name", ""),
            parents=tuple(payload.get("parents") or ()),
        )


@dataclass(frozen=True)
class ResolvedPath:
    """Ancestor folder names, root first, excluding the item's own name."""

    parts: Tuple[str, ...] = ()

    def as_posix(self) -> str:
        return "/".join(self.parts)

    def __str__(self) -> str:
        return self.as_posix()

    def __bool__(self) -> bool:
        return bool(self.parts)
