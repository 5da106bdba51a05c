"""Tests for linting and action collection against the fixture workflows."""

import os

import pytest

from permlint.config import Config, load_builtin_config
from permlint.engine.collector import ActionCollector, build_config
from permlint.engine.diagnostic import (
    EXCESSIVE_RULE_ID,
    INSUFFICIENT_RULE_ID,
    Diagnostic,
)
from permlint.engine.linter import Linter, lint_workflows
from permlint.parser import parse_workflow


# ---------------------------------------------------------------------------
# Linter against ci.yml (which calls reusable.yml)
# ---------------------------------------------------------------------------

@pytest.fixture
def ci_diagnostics(fixture_config, fixtures_root, ci_workflow_path):
    return Linter(fixture_config, fixtures_root).lint(ci_workflow_path)


class TestLinterFixture:
    def test_messages_in_order(self, ci_diagnostics):
        assert [d.message for d in ci_diagnostics] == [
            "job release has excessive permission: issues:write",
            "job scan has insufficient permission: security-events:write (required by github/codeql-action/upload-sarif)",
            "job lint has excessive permission: pull-requests:write",
        ]

    def test_declared_permission_position(self, ci_diagnostics, ci_workflow_path):
        d = ci_diagnostics[0]
        assert (d.file_path, d.line, d.column) == (ci_workflow_path, 15, 15)
        assert d.rule_id == EXCESSIVE_RULE_ID

    def test_action_step_position(self, ci_diagnostics):
        d = ci_diagnostics[1]
        assert (d.line, d.column) == (25, 15)
        assert d.rule_id == INSUFFICIENT_RULE_ID

    def test_undeclared_jobs_are_not_excessive(self, ci_diagnostics):
        assert not any("job call-reusable " in d.message for d in ci_diagnostics)
        assert not any("job external " in d.message for d in ci_diagnostics)

    def test_callee_diagnostics_use_callee_path(self, ci_diagnostics, fixtures_root):
        d = ci_diagnostics[2]
        expected = os.path.join(fixtures_root, ".github", "workflows", "reusable.yml")
        assert os.path.normpath(d.file_path) == os.path.normpath(expected)
        assert d.line == 10

    def test_clean_job_has_no_findings(self, ci_diagnostics):
        assert not any("job build " in d.message for d in ci_diagnostics)

    def test_unconfigured_action_adds_nothing(self, ci_diagnostics):
        assert not any("create-pull-request" in d.message for d in ci_diagnostics)


class TestLinterIgnores:
    def test_ignored_category_is_suppressed(self, fixture_config, fixtures_root, ci_workflow_path):
        fixture_config.ignores = {ci_workflow_path: {"release": ["issues"]}}
        diagnostics = Linter(fixture_config, fixtures_root).lint(ci_workflow_path)
        assert not any(d.message.startswith("job release ") for d in diagnostics)
        assert len(diagnostics) == 2

    def test_ignore_for_other_job_has_no_effect(self, fixture_config, fixtures_root, ci_workflow_path):
        fixture_config.ignores = {ci_workflow_path: {"scan": ["issues"]}}
        diagnostics = Linter(fixture_config, fixtures_root).lint(ci_workflow_path)
        assert len(diagnostics) == 3


class TestLintWorkflows:
    def test_each_top_level_file_walked_independently(self, fixture_config, fixtures_root, ci_workflow_path, reusable_workflow_path):
        diagnostics = lint_workflows([ci_workflow_path, reusable_workflow_path], fixture_config, fixtures_root)
        lint_findings = [d for d in diagnostics if d.message.startswith("job lint ")]
        # once via the call from ci.yml, once as its own top-level file
        assert len(lint_findings) == 2

    def test_empty_config_only_flags_declarations(self, fixtures_root, reusable_workflow_path):
        diagnostics = lint_workflows([reusable_workflow_path], Config(), fixtures_root)
        assert [d.message for d in diagnostics] == [
            "job lint has excessive permission: contents:read",
            "job lint has excessive permission: pull-requests:write",
        ]


# ---------------------------------------------------------------------------
# Diagnostic
# ---------------------------------------------------------------------------

class TestDiagnostic:
    def test_str(self):
        d = Diagnostic("job a has excessive permission: issues:write", "ci.yml", 3, 7)
        assert str(d) == "ci.yml:3:7: job a has excessive permission: issues:write"

    def test_to_dict(self):
        d = Diagnostic("msg", "ci.yml", 3, 7, EXCESSIVE_RULE_ID)
        assert d.to_dict() == {"message": "msg", "filepath": "ci.yml", "line": 3, "column": 7}

    def test_immutable(self):
        d = Diagnostic("msg", "ci.yml")
        with pytest.raises(AttributeError):
            d.message = "other"


# ---------------------------------------------------------------------------
# Action collection
# ---------------------------------------------------------------------------

class TestActionCollector:
    def test_collects_from_jobs(self, ci_workflow_path):
        collector = ActionCollector()
        for job in parse_workflow(ci_workflow_path).jobs:
            collector.on_job(ci_workflow_path, job)
        assert collector.repositories() == [
            "actions/checkout",
            "github/codeql-action/upload-sarif",
            "softprops/action-gh-release",
        ]

    def test_build_config_follows_calls(self, fixtures_root, ci_workflow_path):
        config = build_config([ci_workflow_path], fixtures_root)
        assert list(config.repositories) == [
            "actions/checkout",
            "github/codeql-action/upload-sarif",
            "peter-evans/create-pull-request",
            "softprops/action-gh-release",
        ]
        assert all(perms == {} for perms in config.repositories.values())

    def test_build_config_then_merge_builtin(self, fixtures_root, ci_workflow_path):
        config = build_config([ci_workflow_path], fixtures_root)
        config.merge(load_builtin_config(), overwrite=True)
        assert config.lookup("actions/checkout") != []
        assert "actions/stale" in config.repositories

    def test_build_config_no_workflows(self):
        assert build_config([]).repositories == {}
