"""
Permission scopes and the set of permission categories GitHub recognizes.

Scopes form a three-element chain, none < read < write, so merging two
requirements is just max().
"""

from enum import IntEnum


class Scope(IntEnum):
    NONE = 0
    READ = 1
    WRITE = 2

    @classmethod
    def parse(cls, token: str) -> "Scope":
        """Convert a workflow/config token ("none", "read", "write") to a Scope."""
        try:
            return _TOKENS[token]
        except (KeyError, TypeError):
            raise ValueError(f"invalid permission value: {token}") from None

    def __str__(self) -> str:
        return self.name.lower()

    def __format__(self, format_spec: str) -> str:
        # IntEnum would otherwise format as the integer value
        return format(str(self), format_spec)


_TOKENS: dict[str, Scope] = {str(s): s for s in Scope}

# Shorthand values accepted in place of a permissions mapping
ALL_SHORTHANDS: dict[str, Scope] = {
    "read-all": Scope.READ,
    "write-all": Scope.WRITE,
}

# GITHUB_TOKEN permission categories
CATEGORIES: frozenset[str] = frozenset({
    "actions",
    "checks",
    "contents",
    "deployments",
    "id-token",
    "issues",
    "discussions",
    "packages",
    "pages",
    "pull-requests",
    "repository-projects",
    "security-events",
    "statuses",
})
