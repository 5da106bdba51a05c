"""
Permission requirement maps: category -> strongest scope, with provenance.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from permlint.engine.scope import Scope
from permlint.parser.workflow_parser import Position


@dataclass(frozen=True)
class Permission:
    """One permission entry: which scope a category needs, and who asked for it."""
    category: str
    scope: Scope
    provenance: str = ""                # action identity, empty for declared grants
    position: Optional[Position] = None

    def __str__(self) -> str:
        if self.provenance:
            return f"{self.scope} (required by {self.provenance})"
        return str(self.scope)


class PermissionMap:
    """At most one Permission per category; the strongest scope wins.

    On a tie the entry seen first is kept, so provenance is stable in
    step order.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Permission] = {}

    def add(
        self,
        category: str,
        provenance: str,
        scope: Scope,
        position: Optional[Position] = None,
    ) -> None:
        current = self._entries.get(category)
        if current is None or current.scope < scope:
            self._entries[category] = Permission(category, scope, provenance, position)

    def add_permission(self, permission: Permission) -> None:
        self.add(permission.category, permission.provenance, permission.scope, permission.position)

    def is_empty(self) -> bool:
        return not self._entries

    def get(self, category: str) -> Optional[Permission]:
        return self._entries.get(category)

    def categories(self) -> list[str]:
        return list(self._entries)

    def __getitem__(self, category: str) -> Permission:
        return self._entries[category]

    def __contains__(self, category: object) -> bool:
        return category in self._entries

    def __iter__(self) -> Iterator[Permission]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PermissionMap):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}:{v}" for k, v in self._entries.items())
        return f"PermissionMap({inner})"
