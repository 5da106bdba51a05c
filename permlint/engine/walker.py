"""
Walk a workflow and, recursively, the reusable workflows its jobs call.

The walker owns a visited set of workflow files so that each file is
expanded at most once per walk: diamond-shaped call graphs do not produce
duplicate diagnostics and cyclic ones (including a workflow calling
itself) terminate.
"""

import logging
import os
from typing import Protocol

from permlint.parser.workflow_parser import Job, parse_workflow

logger = logging.getLogger(__name__)


class JobProcessor(Protocol):
    """Per-job strategy driven by the walker (linting, action collection)."""

    def on_job(self, path: str, job: Job) -> None:
        ...


class WorkflowWalker:
    """
    Depth-first traversal over a workflow call graph.

    Args:
        root: Directory that workflow-call locators such as
              `./.github/workflows/build.yml` are resolved against
              (the repository root; defaults to the working directory).
    """

    def __init__(self, root: str = ".") -> None:
        self.root = root
        self._visited: set[str] = set()

    def _key(self, path: str) -> str:
        return os.path.abspath(path)

    def _resolve(self, locator: str) -> str:
        return os.path.normpath(os.path.join(self.root, locator))

    def is_visited(self, path: str) -> bool:
        return self._key(path) in self._visited

    def walk(self, path: str, processor: JobProcessor) -> None:
        """
        Walk `path` and every reachable workflow call not yet visited.

        Raises:
            FileNotFoundError: If `path` itself does not exist.
            yaml.YAMLError, ValueError: If any opened workflow fails to parse.
        """
        if self.is_visited(path):
            logger.debug("Already walked %s, skipping", path)
            return
        self._visited.add(self._key(path))
        self._walk(path, processor)

    def _walk(self, path: str, processor: JobProcessor) -> None:
        workflow = parse_workflow(path)

        for job in workflow.jobs:
            processor.on_job(path, job)

            call = job.workflow_call
            if call is None:
                continue

            target = self._resolve(call.uses)
            if self.is_visited(target):
                logger.debug("Job '%s': %s already walked", job.job_id, call.uses)
                continue
            if not os.path.isfile(target):
                # Calls into other repositories cannot be followed locally
                logger.debug("Job '%s': %s not found locally, not descending", job.job_id, call.uses)
                continue

            logger.info("Following workflow call %s -> %s", path, target)
            self._visited.add(self._key(target))
            self._walk(target, processor)
