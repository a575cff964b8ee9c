"""Write published documents into the API repository tree."""

import json
import logging
from pathlib import Path
from typing import Any, List

from .errors import WriteError
from .models import Document, Stream, WriteOutcome

logger = logging.getLogger(__name__)

INDEX_FILENAME = "index.json"


def serialize(data: Any) -> str:
    """Render JSON with two-space indentation and a trailing newline."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


class Publisher:
    """Writes per-record documents and aggregate indexes.

    Every write is independent: a failure is logged and returned as a failed
    ``WriteOutcome`` so the remaining writes still happen.
    """

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)

    def document_path(self, stream: Stream, record_id: str) -> Path:
        return self.output_dir / stream.value / record_id / INDEX_FILENAME

    def index_path(self, stream: Stream) -> Path:
        return self.output_dir / stream.index_name / INDEX_FILENAME

    def artifact_paths(self) -> List[Path]:
        """Paths that make up the published data set, in staging order."""
        return [
            self.index_path(Stream.DPG),
            self.output_dir / Stream.DPG.value,
            self.index_path(Stream.NOMINEE),
            self.output_dir / Stream.NOMINEE.value,
        ]

    def write_document(
        self, stream: Stream, record_id: str, document: Document
    ) -> WriteOutcome:
        return self._write(self.document_path(stream, record_id), document)

    def write_index(self, stream: Stream, entries: List[Document]) -> WriteOutcome:
        return self._write(self.index_path(stream), entries)

    def _write(self, path: Path, data: Any) -> WriteOutcome:
        folder = path.parent
        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            error = WriteError(f"An error occurred while creating folder {folder}: {e}")
            logger.error(str(error))
            return WriteOutcome(path, ok=False, error=str(error))

        try:
            with path.open("w", encoding="utf-8", newline="\n") as f:
                f.write(serialize(data))
        except OSError as e:
            error = WriteError(f"An error occurred while writing {path}: {e}")
            logger.error(str(error))
            return WriteOutcome(path, ok=False, error=str(error))

        logger.debug(f"Wrote {path}")
        return WriteOutcome(path, ok=True)
