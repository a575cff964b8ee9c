"""Keeps the API repository in sync and commits published data."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence

from .config import Settings
from .errors import CommitError, GitCommandError, SyncError
from .git import PublicationRepository
from .models import CommitResult

logger = logging.getLogger(__name__)


class SyncState(str, Enum):
    ABSENT = "absent"
    PRESENT = "present"
    SYNCED = "synced"
    DIRTY = "dirty"
    COMMITTED = "committed"
    FAILED = "failed"


class SyncCoordinator:
    """Drives the API repository through clone, merge and commit.

    States move strictly forward: ``ABSENT -> PRESENT -> SYNCED -> DIRTY ->
    COMMITTED``, with ``FAILED`` reachable from clone, merge and commit.
    Nothing is retried or rolled back.
    """

    def __init__(
        self,
        repo_url: str,
        repo_path: Path,
        remote: str = "origin",
        branch: str = "main",
        author_name: str = "Victor Grau Serrat",
        author_email: str = "lacabra@users.noreply.github.com",
        commit_message: str = "Update nominee and DPG API data",
        ssl_verify: bool = True,
        git_binary: str = "git",
    ):
        self.repo_url = repo_url
        self.repo_path = Path(repo_path)
        self.remote = remote
        self.branch = branch
        self.author_name = author_name
        self.author_email = author_email
        self.commit_message = commit_message
        self.ssl_verify = ssl_verify
        self.git_binary = git_binary

        self.repository: Optional[PublicationRepository] = None
        self.state = (
            SyncState.PRESENT
            if PublicationRepository.exists(self.repo_path)
            else SyncState.ABSENT
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "SyncCoordinator":
        return cls(
            repo_url=settings.api_repo_url,
            repo_path=settings.api_repo_path,
            remote=settings.remote,
            branch=settings.branch,
            author_name=settings.commit_author_name,
            author_email=settings.commit_author_email,
            commit_message=settings.commit_message,
            ssl_verify=settings.ssl_verify,
        )

    @property
    def upstream(self) -> str:
        return f"{self.remote}/{self.branch}"

    def __enter__(self) -> "SyncCoordinator":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self.repository is not None:
            self.repository.close()
            self.repository = None

    def _fail(self, error_class, message: str, cause: Exception):
        self.state = SyncState.FAILED
        logger.error(f"{message}: {cause}")
        return error_class(f"{message}: {cause}")

    def ensure_working_copy(self) -> PublicationRepository:
        """Clone the API repository if needed, then fast-forward it.

        Raises:
            SyncError: If clone, fetch or merge fails
        """
        if self.state is SyncState.ABSENT:
            try:
                self.repository = PublicationRepository.clone(
                    self.repo_url,
                    self.repo_path,
                    git_binary=self.git_binary,
                    ssl_verify=self.ssl_verify,
                )
            except GitCommandError as e:
                raise self._fail(
                    SyncError, f"Failed to clone {self.repo_url} into {self.repo_path}", e
                ) from e
            self.state = SyncState.PRESENT

        if self.state is not SyncState.PRESENT:
            raise SyncError(f"Cannot sync repository in state '{self.state.value}'")

        if self.repository is None:
            self.repository = PublicationRepository(
                self.repo_path, git_binary=self.git_binary, ssl_verify=self.ssl_verify
            )

        try:
            self.repository.fetch(self.remote)
            self.repository.checkout(self.branch)
            self.repository.merge_fast_forward(self.upstream)
        except GitCommandError as e:
            raise self._fail(
                SyncError,
                f"Tried opening repo at {self.repo_path} and merging "
                f"'{self.branch}' with '{self.upstream}', but errored out",
                e,
            ) from e

        self.state = SyncState.SYNCED
        logger.info(f"Repository at {self.repo_path} is up to date with {self.upstream}")
        return self.repository

    def mark_dirty(self) -> None:
        if self.state is not SyncState.SYNCED:
            raise SyncError(f"Cannot write into repository in state '{self.state.value}'")
        self.state = SyncState.DIRTY

    def commit(self, paths: Sequence[Path]) -> CommitResult:
        """Stage ``paths`` and commit them on top of the current branch tip.

        Returns a ``nothing_to_commit`` result when the staged tree equals the
        parent tree.

        Raises:
            CommitError: If staging or committing fails
        """
        if self.state is not SyncState.DIRTY or self.repository is None:
            raise CommitError(f"Cannot commit from state '{self.state.value}'")

        repository = self.repository
        try:
            staged = repository.add(paths)
            tree = repository.write_tree()
            parent = repository.rev_parse("HEAD")
            parent_tree = repository.rev_parse("HEAD^{tree}")
        except GitCommandError as e:
            raise self._fail(CommitError, "Failed to stage published data", e) from e

        if not staged or tree == parent_tree:
            self.state = SyncState.COMMITTED
            logger.info("Nothing to commit")
            return CommitResult(CommitResult.NOTHING_TO_COMMIT)

        try:
            commit_id = repository.commit_tree(
                tree,
                parent,
                self.commit_message,
                self.author_name,
                self.author_email,
            )
            repository.update_ref("HEAD", commit_id, parent)
        except GitCommandError as e:
            raise self._fail(CommitError, "Failed to create commit", e) from e

        self.state = SyncState.COMMITTED
        logger.info(f"New commit: {commit_id}")
        return CommitResult(CommitResult.COMMITTED, commit_id)
