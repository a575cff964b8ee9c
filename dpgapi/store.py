"""Read access to the nominee and screening corpora."""

import json
import logging
from pathlib import Path
from typing import List

from .errors import AnnotationNotFound, CorpusParseError, CorpusReadError
from .models import Document

logger = logging.getLogger(__name__)


class RecordStore:
    """Loads submission records and their screening annotations from disk.

    Each corpus is a flat folder of ``<id>.json`` files; the record id is the
    file stem and is not stored inside the payload.
    """

    def __init__(self, nominees_folder: Path, screening_folder: Path):
        self.nominees_folder = Path(nominees_folder)
        self.screening_folder = Path(screening_folder)

    def submission_ids(self) -> List[str]:
        """List every submission id, sorted lexicographically.

        Raises:
            CorpusReadError: If the nominees folder cannot be listed
        """
        if not self.nominees_folder.is_dir():
            raise CorpusReadError(
                f"Nominees folder not found: {self.nominees_folder}"
            )
        try:
            paths = [p for p in self.nominees_folder.glob("*.json") if p.is_file()]
        except OSError as e:
            raise CorpusReadError(
                f"Failed to list nominees folder {self.nominees_folder}: {e}"
            ) from e

        ids = sorted(p.stem for p in paths)
        logger.debug(f"Found {len(ids)} submission files in {self.nominees_folder}")
        return ids

    def load_submission(self, record_id: str) -> Document:
        return self._load(self.nominees_folder / f"{record_id}.json")

    def load_annotation(self, record_id: str) -> Document:
        """Load the screening document for ``record_id``.

        Raises:
            AnnotationNotFound: If no screening file exists for the id
            CorpusParseError: If the file is not a JSON object
        """
        path = self.screening_folder / f"{record_id}.json"
        if not path.is_file():
            raise AnnotationNotFound(record_id)
        return self._load(path)

    @staticmethod
    def _load(path: Path) -> Document:
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise CorpusParseError(f"Malformed content in {path}: {e}") from e
        except OSError as e:
            raise CorpusReadError(f"Failed to read {path}: {e}") from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorpusParseError(f"Malformed JSON in {path}: {e}") from e

        if not isinstance(data, dict):
            raise CorpusParseError(
                f"Expected a JSON object in {path}, got {type(data).__name__}"
            )
        return data
