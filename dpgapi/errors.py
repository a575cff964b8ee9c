"""Exception hierarchy for the DPG API sync."""

from typing import Optional, Sequence


class DPGApiError(Exception):
    """Base class for all sync failures."""
    pass


class CorpusReadError(DPGApiError):
    """Raised when a corpus folder or record file cannot be read."""
    pass


class AnnotationNotFound(CorpusReadError):
    """Raised when an eligible DPG has no screening file."""

    def __init__(self, record_id: str):
        super().__init__(f"No screening data found for '{record_id}'")
        self.record_id = record_id


class CorpusParseError(DPGApiError):
    """Raised when a record file does not hold a JSON object."""
    pass


class WriteError(DPGApiError):
    """Describes a failed artifact write; reported, never raised by the Publisher."""
    pass


class TriggerError(DPGApiError):
    """Raised when the changed-files list cannot be loaded."""
    pass


class GitCommandError(DPGApiError):
    """Raised when a git command exits with a non-zero status."""

    def __init__(
        self, args: Sequence[str], returncode: int, stderr: Optional[str] = None
    ):
        self.command = list(args)
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        message = f"git {' '.join(self.command)} failed with exit code {returncode}"
        if self.stderr:
            message += f": {self.stderr}"
        super().__init__(message)


class SyncError(DPGApiError):
    """Raised when cloning, fetching or merging the API repository fails."""
    pass


class CommitError(DPGApiError):
    """Raised when staging or committing the published data fails."""
    pass
