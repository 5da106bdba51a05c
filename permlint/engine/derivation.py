"""
Build permission maps for a job: what it declares, and what its actions need.
"""

import logging
from typing import Callable, Optional

from permlint.engine.requirements import PermissionMap
from permlint.engine.scope import ALL_SHORTHANDS, CATEGORIES, Scope
from permlint.parser.workflow_parser import Job, Step

logger = logging.getLogger(__name__)

# action identity -> ordered (category, scope) pairs, empty when unknown
PermissionLookup = Callable[[str], list[tuple[str, Scope]]]


def derive_job_permissions(steps: list[Step], lookup: PermissionLookup) -> PermissionMap:
    """
    Fold the configured requirements of every action a job runs into one map.

    Steps are visited in document order so that, on equal scopes, the
    earliest action is reported as the source. Steps without a remote
    action (run steps, local or docker actions) contribute nothing, and
    actions absent from the mapping are assumed to need nothing.
    """
    derived = PermissionMap()
    for step in steps:
        if step.uses is None:
            continue
        identity = step.uses.identity
        requirements = lookup(identity)
        if not requirements:
            logger.debug("No permissions configured for %s", identity)
            continue
        for category, scope in requirements:
            derived.add(category, identity, scope, step.uses_position)
    return derived


def declared_permissions(job: Job) -> Optional[PermissionMap]:
    """
    The job's explicit permissions block as a map, or None when it has none.

    An empty block (`permissions: {}`) yields an empty map, which is not the
    same as an undeclared one. `read-all`/`write-all` grant every category.

    Raises:
        ValueError: For a scope or shorthand GitHub does not accept.
    """
    if job.permissions is None:
        return None

    declared = PermissionMap()
    block = job.permissions
    if block.all is not None:
        if block.all not in ALL_SHORTHANDS:
            raise ValueError(f"invalid permissions value for job {job.job_id}: {block.all}")
        scope = ALL_SHORTHANDS[block.all]
        for category in sorted(CATEGORIES):
            declared.add(category, "", scope, block.position)
        return declared

    for scope_entry in block.scopes.values():
        declared.add(scope_entry.name, "", Scope.parse(scope_entry.value), scope_entry.position)
    return declared
