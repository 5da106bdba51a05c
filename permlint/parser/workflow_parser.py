"""
Parser for GitHub Actions workflow files.

Reads .yml/.yaml workflow files and normalizes the parts that matter for
permission linting (jobs, their permissions blocks, action steps and
reusable workflow calls) into dataclasses carrying source positions.
Only job-level permissions blocks are read; a workflow-level block is left
in `raw`.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml

logger = logging.getLogger(__name__)

# Bookkeeping keys injected by _LineLoader into every mapping
_LINE_KEY = "__line__"
_COLUMN_KEY = "__column__"
_POSITIONS_KEY = "__positions__"
_META_KEYS = (_LINE_KEY, _COLUMN_KEY, _POSITIONS_KEY)

WORKFLOW_EXTENSIONS = (".yml", ".yaml")


class _LineLoader(yaml.SafeLoader):
    """PyYAML loader that stores source positions on every mapping node."""


def _construct_mapping(loader: _LineLoader, node: yaml.MappingNode) -> dict[Any, Any]:
    mapping: dict[Any, Any] = loader.construct_mapping(node, deep=True)
    # YAML marks are 0-indexed
    mapping[_LINE_KEY] = node.start_mark.line + 1
    mapping[_COLUMN_KEY] = node.start_mark.column + 1
    mapping[_POSITIONS_KEY] = {
        loader.construct_object(key_node, deep=True): (
            value_node.start_mark.line + 1,
            value_node.start_mark.column + 1,
        )
        for key_node, value_node in node.value
    }
    return mapping


_LineLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class Position:
    """1-based line/column of a node in the workflow file."""
    line: int
    column: int


@dataclass
class ActionRef:
    """A reference to a GitHub Action used in a step."""
    full_ref: str       # e.g. "github/codeql-action/upload-sarif@v3"

    @property
    def identity(self) -> str:
        """The action name used for permission lookups: everything before '@'."""
        return self.full_ref.split("@", 1)[0]


@dataclass
class Step:
    """A single step within a job."""
    name: Optional[str]
    uses: Optional[ActionRef]
    run: Optional[str]
    raw: dict[str, Any]
    line_number: Optional[int] = None
    uses_position: Optional[Position] = None


@dataclass
class PermissionScope:
    """One declared `category: scope` entry of a permissions block."""
    name: str
    value: str
    position: Optional[Position] = None


@dataclass
class Permissions:
    """A permissions block: either a shorthand (read-all/write-all) or scopes."""
    all: Optional[str] = None
    scopes: dict[str, PermissionScope] = field(default_factory=dict)
    position: Optional[Position] = None


@dataclass
class WorkflowCall:
    """A job-level `uses:` reference to a reusable workflow."""
    uses: str
    position: Optional[Position] = None


@dataclass
class Job:
    """A single job within a workflow."""
    job_id: str
    name: Optional[str]
    permissions: Optional[Permissions]
    steps: list[Step]
    raw: dict[str, Any]
    line_number: Optional[int] = None
    column: Optional[int] = None
    workflow_call: Optional[WorkflowCall] = None

    @property
    def position(self) -> Optional[Position]:
        if self.line_number is None:
            return None
        return Position(self.line_number, self.column or 1)


@dataclass
class Workflow:
    """A parsed GitHub Actions workflow."""
    file_path: str
    name: Optional[str]
    jobs: list[Job]
    raw: dict[str, Any]
    line_number: Optional[int] = None


def _position_of(mapping: dict[Any, Any], key: str) -> Optional[Position]:
    """Return the source position of mapping[key]'s value, if recorded."""
    positions = mapping.get(_POSITIONS_KEY) or {}
    pos = positions.get(key)
    if pos is None:
        return None
    return Position(*pos)


def _items(mapping: dict[Any, Any]) -> list[tuple[Any, Any]]:
    """Mapping items without the loader's bookkeeping keys."""
    return [(k, v) for k, v in mapping.items() if k not in _META_KEYS]


def _parse_action_ref(uses_string: str) -> Optional[ActionRef]:
    """Parse an action reference like 'actions/checkout@v3', or None if it is not one."""
    if not uses_string or "/" not in uses_string:
        logger.debug("Skipping non-action uses reference: %s", uses_string)
        return None

    # Handle docker:// and ./ (local) actions
    if uses_string.startswith("docker://") or uses_string.startswith("./"):
        logger.debug("Skipping local/docker action: %s", uses_string)
        return None

    if "@" not in uses_string:
        logger.debug("Skipping action without version ref: %s", uses_string)
        return None

    action_path, ref = uses_string.split("@", 1)
    parts = action_path.split("/")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        return None

    logger.debug("Parsed action %s@%s", action_path, ref[:12])
    return ActionRef(full_ref=uses_string)


def _parse_step(step_raw: dict[str, Any]) -> Step:
    """Parse a raw step dictionary into a Step dataclass."""
    uses_str = step_raw.get("uses")
    return Step(
        name=step_raw.get("name"),
        uses=_parse_action_ref(str(uses_str)) if uses_str else None,
        run=step_raw.get("run"),
        raw=step_raw,
        line_number=step_raw.get(_LINE_KEY),
        uses_position=_position_of(step_raw, "uses") if uses_str else None,
    )


def _parse_permissions(
    perm_field: Union[str, dict[str, Any], None],
    position: Optional[Position] = None,
) -> Optional[Permissions]:
    """Normalize the permissions field into Permissions or None (undeclared)."""
    if perm_field is None:
        return None
    if isinstance(perm_field, str):
        # e.g. "read-all" or "write-all"
        return Permissions(all=perm_field, position=position)
    if isinstance(perm_field, dict):
        scopes = {
            str(name): PermissionScope(
                name=str(name),
                value=str(value),
                position=_position_of(perm_field, name),
            )
            for name, value in _items(perm_field)
        }
        return Permissions(scopes=scopes, position=position)
    raise ValueError(f"Unsupported permissions value: {perm_field!r}")


def _parse_workflow_call(job_raw: dict[str, Any]) -> Optional[WorkflowCall]:
    uses = job_raw.get("uses")
    if not uses:
        return None
    return WorkflowCall(uses=str(uses), position=_position_of(job_raw, "uses"))


def _parse_job(job_id: str, job_raw: dict[str, Any]) -> Job:
    """Parse a raw job dictionary into a Job dataclass."""
    if not isinstance(job_raw, dict):
        raise ValueError(f"Job '{job_id}' is not a mapping")

    steps_raw = [s for s in job_raw.get("steps") or [] if isinstance(s, dict)]
    logger.debug("Parsing job '%s' with %d step(s)", job_id, len(steps_raw))
    return Job(
        job_id=job_id,
        name=job_raw.get("name"),
        permissions=_parse_permissions(
            job_raw.get("permissions"),
            _position_of(job_raw, "permissions"),
        ),
        steps=[_parse_step(s) for s in steps_raw],
        raw=job_raw,
        line_number=job_raw.get(_LINE_KEY),
        column=job_raw.get(_COLUMN_KEY),
        workflow_call=_parse_workflow_call(job_raw),
    )


def parse_workflow(file_path: str) -> Workflow:
    """
    Parse a single GitHub Actions workflow YAML file.

    Args:
        file_path: Path to the .yml/.yaml workflow file.

    Returns:
        A Workflow dataclass with normalized data.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        yaml.YAMLError: If the file isn't valid YAML.
        ValueError: If the YAML isn't shaped like a workflow.
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Workflow file not found: {file_path}")

    logger.info("Parsing workflow: %s", file_path)

    with open(path, "r") as f:
        raw = yaml.load(f, Loader=_LineLoader)  # noqa: S506  # _LineLoader is safe

    if not isinstance(raw, dict):
        logger.error("File is not a valid YAML mapping: %s", file_path)
        raise ValueError(f"Workflow file is not a valid YAML mapping: {file_path}")

    jobs_raw = raw.get("jobs") or {}
    if not isinstance(jobs_raw, dict):
        raise ValueError(f"'jobs' is not a mapping in {file_path}")

    jobs = [_parse_job(str(job_id), job_data) for job_id, job_data in _items(jobs_raw)]
    logger.debug(
        "Parsed '%s': %d job(s), %d workflow call(s)",
        raw.get("name", "(unnamed)"), len(jobs),
        sum(1 for j in jobs if j.workflow_call is not None),
    )

    return Workflow(
        file_path=file_path,
        name=raw.get("name"),
        jobs=jobs,
        raw=raw,
        line_number=raw.get(_LINE_KEY),
    )


def find_workflow_files(dir_path: str) -> list[str]:
    """
    List workflow files in a directory.

    Args:
        dir_path: Path to a directory containing .yml/.yaml files
                  (typically .github/workflows/).

    Returns:
        Sorted paths of the workflow files found (non-recursive).
    """
    path = Path(dir_path)
    if not path.is_dir():
        raise NotADirectoryError(f"Not a directory: {dir_path}")

    files = sorted(
        str(f) for f in path.iterdir()
        if f.is_file() and f.suffix in WORKFLOW_EXTENSIONS
    )
    logger.debug("Found %d workflow file(s) in %s", len(files), dir_path)
    return files
