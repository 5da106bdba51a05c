"""
Diagnostic: the unit of output produced by linting.
"""

from dataclasses import dataclass
from typing import Any

from permlint.engine.requirements import Permission

EXCESSIVE_RULE_ID = "excessive-permission"
INSUFFICIENT_RULE_ID = "insufficient-permission"


@dataclass(frozen=True)
class Diagnostic:
    """A single permission finding."""
    message: str
    file_path: str
    line: int = 0
    column: int = 0
    rule_id: str = ""

    def __str__(self) -> str:
        return f"{self.file_path}:{self.line}:{self.column}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "filepath": self.file_path,
            "line": self.line,
            "column": self.column,
        }


def _diagnostic(kind: str, rule_id: str, job_id: str, permission: Permission, file_path: str) -> Diagnostic:
    position = permission.position
    return Diagnostic(
        message=f"job {job_id} has {kind} permission: {permission.category}:{permission}",
        file_path=file_path,
        line=position.line if position else 0,
        column=position.column if position else 0,
        rule_id=rule_id,
    )


def excessive_diagnostic(job_id: str, permission: Permission, file_path: str) -> Diagnostic:
    return _diagnostic("excessive", EXCESSIVE_RULE_ID, job_id, permission, file_path)


def insufficient_diagnostic(job_id: str, permission: Permission, file_path: str) -> Diagnostic:
    return _diagnostic("insufficient", INSUFFICIENT_RULE_ID, job_id, permission, file_path)

