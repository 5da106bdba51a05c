from .scope import CATEGORIES, Scope
from .requirements import Permission, PermissionMap
from .derivation import declared_permissions, derive_job_permissions
from .comparison import DEFAULT_PERMISSIONS, PermissionDiff, compare_permissions
from .diagnostic import Diagnostic
from .walker import JobProcessor, WorkflowWalker

__all__ = [
    "CATEGORIES",
    "DEFAULT_PERMISSIONS",
    "Diagnostic",
    "JobProcessor",
    "Permission",
    "PermissionDiff",
    "PermissionMap",
    "Scope",
    "WorkflowWalker",
    "compare_permissions",
    "declared_permissions",
    "derive_job_permissions",
]
