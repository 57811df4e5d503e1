"""Shared pytest fixtures for repobrowse tests."""

import shutil

import pytest

from fakes import FakeBackend
from repobrowse.backend.models import Repository
from repobrowse.config.ui_config import UIConfig
from repobrowse.ui.context import Context
from repobrowse.ui.zones import ZoneManager


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def copied():
    return []


@pytest.fixture
def ctx(backend, copied):
    return Context(
        backend=backend,
        config=UIConfig(public_url="ssh://example.com"),
        zones=ZoneManager(),
        clipboard=copied.append,
    )


@pytest.fixture
def repository():
    return Repository(name="demo", project_name="Demo Project", description="A demo repo")


@pytest.fixture
def git_repo(tmp_path):
    """A small on-disk repository: two commits on main, a tag and a branch."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    import git

    root = tmp_path / "demo"
    root.mkdir()
    repo = git.Repo.init(root)
    with repo.config_writer() as cw:
        cw.set_value("user", "name", "Test User")
        cw.set_value("user", "email", "test@example.com")

    (root / "README.md").write_text("# Demo\n\nA test repository.\n")
    (root / "src").mkdir()
    (root / "src" / "app.py").write_text("print('hello')\n")
    repo.index.add(["README.md", "src/app.py"])
    repo.index.commit("Initial commit")
    repo.create_tag("v1.0")

    (root / "notes.txt").write_text("notes\n")
    repo.index.add(["notes.txt"])
    repo.index.commit("Add notes")
    repo.create_head("feature")

    (root / ".git" / "description").write_text("A test repository\n")
    return root
