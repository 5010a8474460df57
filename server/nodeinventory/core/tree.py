"""In-memory representation of a recursively fetched store subtree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .keypath import leaf_segment


@dataclass(frozen=True)
class StoreNode:
    """One key of the store and, for directories, its children.

    Children keep the order the store returned them in.
    """

    key: str
    value: Optional[str] = None
    dir: bool = False
    children: List["StoreNode"] = field(default_factory=list)

    @property
    def name(self) -> str:
        return leaf_segment(self.key)

    @classmethod
    def from_etcd(cls, payload: Dict[str, Any]) -> "StoreNode":
        """Build a node from the ``node`` object of an etcd v2 response."""
        is_dir = bool(payload.get("dir", False))
        children = [cls.from_etcd(child) for child in payload.get("nodes", []) or []]
        return cls(
            key=payload.get("key", "/"),
            value=None if is_dir else payload.get("value", ""),
            dir=is_dir,
            children=children,
        )
