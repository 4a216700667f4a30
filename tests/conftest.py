"""
Shared test fixtures and configuration.

Git-backed fixtures build a real template repository under ``tmp_path``
and clone it over a ``file://`` URL.
"""

import shutil
from pathlib import Path

import pytest

from aurora.core.models.settings import Settings, TemplateSource
from tests.helpers import TEMPLATE_MODULE, FakeRunner, git, write_template_tree


@pytest.fixture
def template_repo(tmp_path: Path) -> Path:
    """A template repository with ``main`` and ``demo`` branches."""
    if shutil.which("git") is None:
        pytest.skip("git not installed")

    repo = tmp_path / "template"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    write_template_tree(repo)
    git(repo, "add", "-A")
    git(repo, "commit", "-q", "-m", "template")

    git(repo, "checkout", "-q", "-b", "demo")
    (repo / "internal" / "app" / "demo.go").write_text(
        f'package app\n\nimport _ "{TEMPLATE_MODULE}/api"\n'
    )
    git(repo, "add", "-A")
    git(repo, "commit", "-q", "-m", "demo")
    git(repo, "checkout", "-q", "main")
    return repo


@pytest.fixture
def settings(template_repo: Path) -> Settings:
    """Settings pointing at the local template repository."""
    return Settings(
        template=TemplateSource(url=template_repo.as_uri(), module=TEMPLATE_MODULE),
    )


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """An empty parent directory for new projects."""
    ws = tmp_path / "workspace"
    ws.mkdir()
    return ws


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()
