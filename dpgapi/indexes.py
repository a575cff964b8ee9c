"""Aggregate index accumulation."""

from typing import List, Tuple

from .models import Document, ReconciledRecord, Stream


class IndexBuilder:
    """Collects the ``dpgs`` and ``nominees`` arrays in insertion order."""

    def __init__(self) -> None:
        self._dpgs: List[Document] = []
        self._nominees: List[Document] = []

    def add_dpg(self, snapshot: Document) -> None:
        self._dpgs.append(snapshot)

    def add_nominee(self, document: Document) -> None:
        self._nominees.append(document)

    def add(self, record: ReconciledRecord) -> None:
        if record.stream is Stream.DPG:
            self.add_dpg(record.index_entry)
        else:
            self.add_nominee(record.index_entry)

    @property
    def dpg_count(self) -> int:
        return len(self._dpgs)

    @property
    def nominee_count(self) -> int:
        return len(self._nominees)

    def build_indexes(self) -> Tuple[List[Document], List[Document]]:
        """Return ``(dpgs, nominees)`` as new lists."""
        return list(self._dpgs), list(self._nominees)
