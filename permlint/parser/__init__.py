from .workflow_parser import (
    ActionRef,
    Job,
    Permissions,
    PermissionScope,
    Position,
    Step,
    Workflow,
    WorkflowCall,
    find_workflow_files,
    parse_workflow,
)

__all__ = [
    "ActionRef",
    "Job",
    "Permissions",
    "PermissionScope",
    "Position",
    "Step",
    "Workflow",
    "WorkflowCall",
    "find_workflow_files",
    "parse_workflow",
]
