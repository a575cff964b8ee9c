"""Shared helpers for building corpora and git repositories in tests."""

import json
import shutil
import subprocess
from pathlib import Path
from typing import Any

import pytest

requires_git = pytest.mark.skipif(
    shutil.which("git") is None, reason="git binary not available"
)

GIT_IDENTITY = ["-c", "user.name=Test User", "-c", "user.email=test@example.com"]


def git(cwd: Path, *args: str) -> str:
    """Run a git command for test setup and return its stdout."""
    result = subprocess.run(
        ["git", *GIT_IDENTITY, *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def write_json(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))
