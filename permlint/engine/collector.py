"""
Collect the actions used across workflows, to seed a configuration file.
"""

import logging

from permlint.config import Config
from permlint.engine.walker import WorkflowWalker
from permlint.parser.workflow_parser import Job

logger = logging.getLogger(__name__)


class ActionCollector:
    """Records the identity of every remote action a job runs."""

    def __init__(self) -> None:
        self.actions: list[str] = []

    def on_job(self, path: str, job: Job) -> None:
        for step in job.steps:
            if step.uses is not None:
                self.actions.append(step.uses.identity)

    def repositories(self) -> list[str]:
        return sorted(set(self.actions))


def build_config(workflow_paths: list[str], root: str = ".") -> Config:
    """Walk all workflows and return a Config with an empty entry per action."""
    collector = ActionCollector()
    walker = WorkflowWalker(root)
    for path in workflow_paths:
        walker.walk(path, collector)

    config = Config()
    for repository in collector.repositories():
        config.repositories[repository] = {}
    logger.info("Collected %d action(s) from %d workflow(s)", len(config.repositories), len(workflow_paths))
    return config
