"""Fixtures for package health checks (run with ``pytest smoke_tests -m smoke``)."""

from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def project_root() -> Path:
    return PROJECT_ROOT


@pytest.fixture
def pyproject(project_root: Path) -> Path:
    return project_root / "pyproject.toml"
