"""
Lint jobs for excessive and insufficient permissions.
"""

import logging
import time

from permlint.config import Config
from permlint.engine.comparison import compare_permissions
from permlint.engine.derivation import declared_permissions, derive_job_permissions
from permlint.engine.diagnostic import Diagnostic, excessive_diagnostic, insufficient_diagnostic
from permlint.engine.walker import WorkflowWalker
from permlint.parser.workflow_parser import Job

logger = logging.getLogger(__name__)


class Linter:
    """Diffs each job's declared permissions against what its actions need."""

    def __init__(self, config: Config, root: str = ".") -> None:
        self.config = config
        self.root = root
        self.diagnostics: list[Diagnostic] = []

    def lint(self, path: str) -> list[Diagnostic]:
        """Lint one workflow file and the workflows it calls.

        Returns the diagnostics from this walk; `self.diagnostics` keeps
        accumulating across calls.
        """
        t0 = time.monotonic()
        before = len(self.diagnostics)
        WorkflowWalker(self.root).walk(path, self)
        elapsed_ms = (time.monotonic() - t0) * 1000
        logger.info(
            "Completed: %d diagnostic(s) for %s in %.1fms",
            len(self.diagnostics) - before, path, elapsed_ms,
        )
        return self.diagnostics[before:]

    def on_job(self, path: str, job: Job) -> None:
        derived = derive_job_permissions(job.steps, self.config.lookup)
        diff = compare_permissions(declared_permissions(job), derived)

        for permission in diff.excessive:
            if self.config.ignore_enabled(path, job.job_id, permission.category):
                logger.debug("Ignoring excessive %s for job '%s'", permission.category, job.job_id)
                continue
            self.diagnostics.append(excessive_diagnostic(job.job_id, permission, path))

        for permission in diff.insufficient:
            if self.config.ignore_enabled(path, job.job_id, permission.category):
                logger.debug("Ignoring insufficient %s for job '%s'", permission.category, job.job_id)
                continue
            self.diagnostics.append(insufficient_diagnostic(job.job_id, permission, path))

        logger.debug(
            "Job '%s': %d excessive, %d insufficient",
            job.job_id, len(diff.excessive), len(diff.insufficient),
        )


def lint_workflows(paths: list[str], config: Config, root: str = ".") -> list[Diagnostic]:
    """Lint each top-level workflow independently and concatenate the results."""
    diagnostics: list[Diagnostic] = []
    for path in paths:
        diagnostics.extend(Linter(config, root).lint(path))
    return diagnostics
