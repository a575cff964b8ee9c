"""Thin handle over a git working copy, driven through the git CLI."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .errors import GitCommandError

logger = logging.getLogger(__name__)


def _git_command(args: Sequence[str], git_binary: str, ssl_verify: bool) -> List[str]:
    command = [git_binary]
    if not ssl_verify:
        command += ["-c", "http.sslVerify=false"]
    return command + list(args)


def _run(
    args: Sequence[str],
    cwd: Optional[Path],
    git_binary: str = "git",
    ssl_verify: bool = True,
    env: Optional[Dict[str, str]] = None,
) -> str:
    command = _git_command(args, git_binary, ssl_verify)
    logger.debug(f"Running {' '.join(command)} in {cwd or os.getcwd()}")
    try:
        result = subprocess.run(
            command,
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
            env=env,
            check=False,
        )
    except OSError as e:
        raise GitCommandError(args, -1, str(e)) from e

    if result.returncode != 0:
        raise GitCommandError(args, result.returncode, result.stderr)
    return result.stdout.strip()


class PublicationRepository:
    """Explicit handle on the local clone of the API repository.

    The handle is released with ``close()`` (or by leaving a ``with`` block);
    commands issued afterwards fail.
    """

    def __init__(self, path: Path, git_binary: str = "git", ssl_verify: bool = True):
        self.path = Path(path)
        self.git_binary = git_binary
        self.ssl_verify = ssl_verify
        self._closed = False

    @classmethod
    def clone(
        cls,
        url: str,
        path: Path,
        git_binary: str = "git",
        ssl_verify: bool = True,
    ) -> "PublicationRepository":
        path = Path(path)
        logger.info(f"Cloning {url} into {path}")
        _run(["clone", url, str(path)], None, git_binary, ssl_verify)
        return cls(path, git_binary=git_binary, ssl_verify=ssl_verify)

    @staticmethod
    def exists(path: Path) -> bool:
        return Path(path).exists()

    def close(self) -> None:
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "PublicationRepository":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def git(self, *args: str, env: Optional[Dict[str, str]] = None) -> str:
        if self._closed:
            raise GitCommandError(args, -1, f"repository handle for {self.path} is closed")
        return _run(args, self.path, self.git_binary, self.ssl_verify, env)

    # ------------------------------------------------------------------
    # Remote sync
    # ------------------------------------------------------------------

    def fetch(self, remote: str) -> None:
        self.git("fetch", remote)

    def checkout(self, branch: str) -> None:
        self.git("checkout", branch)

    def merge_fast_forward(self, upstream: str) -> None:
        self.git("merge", "--ff-only", upstream)

    # ------------------------------------------------------------------
    # Index and commits
    # ------------------------------------------------------------------

    def pathspec(self, path: Path) -> str:
        """Convert a filesystem path inside the working copy to a pathspec."""
        return Path(path).resolve().relative_to(self.path.resolve()).as_posix()

    def add(self, paths: Sequence[Path]) -> List[str]:
        """Stage ``paths`` (including deletions); returns the pathspecs used.

        Paths missing from both the working tree and the index are skipped,
        since git rejects pathspecs that match nothing.
        """
        pathspecs = []
        for path in paths:
            spec = self.pathspec(path)
            if Path(path).exists() or self.is_tracked(spec):
                pathspecs.append(spec)
        if pathspecs:
            self.git("add", "-A", "--", *pathspecs)
        return pathspecs

    def is_tracked(self, pathspec: str) -> bool:
        return bool(self.git("ls-files", "--", pathspec))

    def write_tree(self) -> str:
        return self.git("write-tree")

    def rev_parse(self, rev: str) -> str:
        return self.git("rev-parse", "--verify", rev)

    def commit_tree(
        self,
        tree: str,
        parent: str,
        message: str,
        author_name: str,
        author_email: str,
    ) -> str:
        env = dict(os.environ)
        env.update(
            {
                "GIT_AUTHOR_NAME": author_name,
                "GIT_AUTHOR_EMAIL": author_email,
                "GIT_COMMITTER_NAME": author_name,
                "GIT_COMMITTER_EMAIL": author_email,
            }
        )
        return self.git("commit-tree", tree, "-p", parent, "-m", message, env=env)

    def update_ref(self, ref: str, new: str, old: Optional[str] = None) -> None:
        args = ["update-ref", ref, new]
        if old:
            args.append(old)
        self.git(*args)
