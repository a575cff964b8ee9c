"""Data models shared by the reconciliation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

DPG_STAGE = "DPG"

# Arbitrary JSON object, key order preserved
Document = Dict[str, Any]


class Stream(str, Enum):
    """Output stream a record is published under."""

    DPG = "dpg"
    NOMINEE = "nominee"

    @property
    def index_name(self) -> str:
        """Folder holding the aggregate index for this stream."""
        return "dpgs" if self is Stream.DPG else "nominees"

    @classmethod
    def for_stage(cls, stage: Any) -> "Stream":
        return cls.DPG if stage == DPG_STAGE else cls.NOMINEE


@dataclass
class ReconciledRecord:
    """One submission merged with its screening data."""

    record_id: str
    stream: Stream
    document: Document
    # Entry for the aggregate index; for DPGs this is the pre-screening snapshot
    index_entry: Document
    annotated: bool = False


@dataclass(frozen=True)
class WriteOutcome:
    """Result of writing a single artifact."""

    path: Path
    ok: bool
    error: Optional[str] = None


@dataclass
class RunReport:
    """Per-run tally of reconciled records and artifact writes."""

    dpgs: int = 0
    nominees: int = 0
    # DPGs that received screening data
    screened: int = 0
    writes: List[WriteOutcome] = field(default_factory=list)
    unreadable: List[str] = field(default_factory=list)

    @property
    def failed_writes(self) -> List[WriteOutcome]:
        return [outcome for outcome in self.writes if not outcome.ok]

    def summary_line(self) -> str:
        return f"{self.dpgs} DPGs found, {self.nominees} nominees found."


@dataclass(frozen=True)
class CommitResult:
    """Outcome of the commit step."""

    COMMITTED = "committed"
    NOTHING_TO_COMMIT = "nothing_to_commit"

    status: str
    commit_id: Optional[str] = None

    @property
    def committed(self) -> bool:
        return self.status == self.COMMITTED
