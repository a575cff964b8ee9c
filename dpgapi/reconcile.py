"""Merge submission records with their screening annotations."""

import copy
import logging
from typing import Iterable, Optional

from .errors import AnnotationNotFound
from .models import Document, ReconciledRecord, Stream
from .store import RecordStore

logger = logging.getLogger(__name__)

# Annotation keys that are never copied onto the published document
PROTECTED_KEYS = ("name", "id")


class Reconciler:
    """Builds the normalized document for each submission."""

    def __init__(self, store: RecordStore, excluded_ids: Iterable[str] = ()):
        self.store = store
        self.excluded_ids = frozenset(excluded_ids)

    def is_annotation_eligible(self, record_id: str, stream: Stream) -> bool:
        return stream is Stream.DPG and record_id not in self.excluded_ids

    def reconcile(self, record_id: str, fields: Document) -> ReconciledRecord:
        """Merge one submission into its published form.

        Nominees are published as ``{"id": ..., **fields}``. DPGs additionally
        receive their screening fields (except ``name``), while the aggregate
        index keeps a deep copy taken before the overlay.
        """
        document: Document = {"id": record_id}
        document.update(fields)

        stream = Stream.for_stage(fields.get("stage"))
        if stream is Stream.NOMINEE:
            return ReconciledRecord(record_id, stream, document, document)

        snapshot = copy.deepcopy(document)
        annotated = False
        if self.is_annotation_eligible(record_id, stream):
            annotation = self._find_annotation(record_id)
            if annotation is not None:
                self._overlay(record_id, document, annotation)
                annotated = True
        else:
            logger.debug(f"Skipping screening data for excluded DPG '{record_id}'")

        return ReconciledRecord(record_id, stream, document, snapshot, annotated)

    def _find_annotation(self, record_id: str) -> Optional[Document]:
        try:
            return self.store.load_annotation(record_id)
        except AnnotationNotFound:
            logger.warning(f"DPG '{record_id}' has no screening data")
            return None

    @staticmethod
    def _overlay(record_id: str, document: Document, annotation: Document) -> None:
        for key, value in annotation.items():
            if key in PROTECTED_KEYS:
                if key == "id":
                    logger.warning(
                        f"Ignoring 'id' field in screening data for '{record_id}'"
                    )
                continue
            document[key] = value
