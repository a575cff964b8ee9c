"""Pytest configuration and fixtures."""

import subprocess
from pathlib import Path
from typing import Any, Callable

import pytest

from dpgapi.config import Settings
from tests.helpers import git, write_json


@pytest.fixture
def corpus(tmp_path: Path) -> Path:
    """Create empty nominees/ and screening/ folders."""
    root = tmp_path / "registry"
    (root / "nominees").mkdir(parents=True)
    (root / "screening").mkdir(parents=True)
    return root


@pytest.fixture
def add_nominee(corpus: Path) -> Callable[[str, dict], Path]:
    def _add(record_id: str, data: dict) -> Path:
        return write_json(corpus / "nominees" / f"{record_id}.json", data)

    return _add


@pytest.fixture
def add_screening(corpus: Path) -> Callable[[str, dict], Path]:
    def _add(record_id: str, data: dict) -> Path:
        return write_json(corpus / "screening" / f"{record_id}.json", data)

    return _add


@pytest.fixture
def seed_repo(tmp_path: Path) -> Path:
    """Working repository used to author commits on the remote."""
    seed = tmp_path / "seed"
    seed.mkdir()
    git(seed, "init")
    git(seed, "symbolic-ref", "HEAD", "refs/heads/main")
    (seed / "README.md").write_text("# publicgoods-api\n", encoding="utf-8")
    git(seed, "add", "README.md")
    git(seed, "commit", "-m", "Initial commit")
    return seed


@pytest.fixture
def remote_repo(tmp_path: Path, seed_repo: Path) -> Path:
    """Bare repository standing in for the GitHub remote."""
    remote = tmp_path / "publicgoods-api.git"
    subprocess.run(
        ["git", "clone", "--bare", str(seed_repo), str(remote)],
        capture_output=True,
        check=True,
    )
    git(seed_repo, "remote", "add", "origin", str(remote))
    return remote


@pytest.fixture
def settings_for(tmp_path: Path, corpus: Path) -> Callable[..., Settings]:
    """Build isolated settings pointing at the temporary corpus and clone."""

    def _settings(**overrides: Any) -> Settings:
        values = {
            "nominees_folder": corpus / "nominees",
            "screening_folder": corpus / "screening",
            "api_repo_path": tmp_path / "publicgoods-api",
            "changed_files_path": tmp_path / "files.json",
            "write_workers": 2,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _settings
