"""Shared fixtures for all tests."""

import os
import pytest

from permlint.config import load_config


FIXTURES_ROOT = os.path.join(os.path.dirname(__file__), "fixtures")
WORKFLOWS_DIR = os.path.join(FIXTURES_ROOT, ".github", "workflows")


@pytest.fixture
def fixtures_root():
    """Repository root of the fixture workflows (workflow calls resolve here)."""
    return FIXTURES_ROOT


@pytest.fixture
def fixtures_dir():
    """Path to the fixtures workflow directory."""
    return WORKFLOWS_DIR


@pytest.fixture
def ci_workflow_path():
    """Path to the CI fixture, which calls reusable.yml."""
    return os.path.join(WORKFLOWS_DIR, "ci.yml")


@pytest.fixture
def reusable_workflow_path():
    return os.path.join(WORKFLOWS_DIR, "reusable.yml")


@pytest.fixture
def fixture_config():
    """The action -> permission mapping used with the fixture workflows."""
    return load_config(os.path.join(FIXTURES_ROOT, ".permlint.yml"))
