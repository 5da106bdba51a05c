"""
Diff declared permissions against derived requirements.
"""

from dataclasses import dataclass
from typing import Optional

from permlint.engine.requirements import PermissionMap
from permlint.engine.scope import Scope

# What GitHub grants a job that has no permissions block. This is a platform
# policy (restricted default token), not something derived from the workflow.
DEFAULT_PERMISSIONS: dict[str, Scope] = {"contents": Scope.READ}


@dataclass
class PermissionDiff:
    excessive: PermissionMap
    insufficient: PermissionMap


def default_permissions() -> PermissionMap:
    defaults = PermissionMap()
    for category, scope in DEFAULT_PERMISSIONS.items():
        defaults.add(category, "", scope)
    return defaults


def excessive_permissions(declared: PermissionMap, derived: PermissionMap) -> PermissionMap:
    """Declared grants that no derived requirement justifies, or that exceed it.

    An entry keeps the declared scope and position; where an action does need
    the category at a lower scope, that action is kept as provenance.
    """
    excessive = PermissionMap()
    for granted in declared:
        needed = derived.get(granted.category)
        if needed is None:
            excessive.add_permission(granted)
        elif needed.scope < granted.scope:
            excessive.add(granted.category, needed.provenance, granted.scope, granted.position)
    return excessive


def insufficient_permissions(declared: PermissionMap, derived: PermissionMap) -> PermissionMap:
    """Derived requirements the declared grants do not cover."""
    insufficient = PermissionMap()
    for needed in derived:
        granted = declared.get(needed.category)
        if granted is None or granted.scope < needed.scope:
            insufficient.add_permission(needed)
    return insufficient


def compare_permissions(declared: Optional[PermissionMap], derived: PermissionMap) -> PermissionDiff:
    """
    Compute excessive and insufficient permissions for one job.

    Args:
        declared: The job's permissions block, or None when the job has none.
                  An undeclared job grants nothing explicitly, so it has no
                  excessive entries; DEFAULT_PERMISSIONS is what it can rely
                  on when checking for insufficient ones.
        derived: Requirements derived from the job's actions.
    """
    if declared is None:
        return PermissionDiff(
            excessive=PermissionMap(),
            insufficient=insufficient_permissions(default_permissions(), derived),
        )
    return PermissionDiff(
        excessive=excessive_permissions(declared, derived),
        insufficient=insufficient_permissions(declared, derived),
    )
