"""Reconciliation pass over the nominee corpus."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional

from .errors import CorpusReadError
from .indexes import IndexBuilder
from .models import RunReport, Stream, WriteOutcome
from .publisher import Publisher
from .reconcile import Reconciler
from .store import RecordStore

logger = logging.getLogger(__name__)


class ReconciliationPipeline:
    """Reconciles every submission and publishes the results.

    Records are read and reconciled one at a time. Their document writes go to
    a bounded thread pool, and the two aggregate indexes are written only after
    every document write has finished. Without a publisher the pass only
    counts records.
    """

    def __init__(
        self,
        store: RecordStore,
        reconciler: Reconciler,
        publisher: Optional[Publisher] = None,
        max_workers: int = 4,
    ):
        self.store = store
        self.reconciler = reconciler
        self.publisher = publisher
        self.max_workers = max_workers

    def run(self) -> RunReport:
        """Run one pass.

        Raises:
            CorpusReadError: If the nominees folder cannot be listed
            CorpusParseError: If any record holds malformed content
        """
        start = time.perf_counter()
        report = RunReport()
        builder = IndexBuilder()
        record_ids = self.store.submission_ids()

        futures: List[Future] = []
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            for record_id in record_ids:
                try:
                    fields = self.store.load_submission(record_id)
                    record = self.reconciler.reconcile(record_id, fields)
                except CorpusReadError as e:
                    logger.warning(f"Skipping '{record_id}': {e}")
                    report.unreadable.append(record_id)
                    continue

                builder.add(record)
                if record.annotated:
                    report.screened += 1

                if self.publisher is not None:
                    futures.append(
                        pool.submit(
                            self.publisher.write_document,
                            record.stream,
                            record.record_id,
                            record.document,
                        )
                    )

        report.writes.extend(future.result() for future in futures)
        report.dpgs = builder.dpg_count
        report.nominees = builder.nominee_count

        if self.publisher is not None:
            report.writes.extend(self._write_indexes(builder))

        logger.info(
            "Reconciliation completed",
            extra={
                "dpgs": report.dpgs,
                "nominees": report.nominees,
                "screened": report.screened,
                "failed_writes": len(report.failed_writes),
                "duration_seconds": round(time.perf_counter() - start, 2),
            },
        )
        return report

    def _write_indexes(self, builder: IndexBuilder) -> List[WriteOutcome]:
        dpgs, nominees = builder.build_indexes()
        return [
            self.publisher.write_index(Stream.DPG, dpgs),
            self.publisher.write_index(Stream.NOMINEE, nominees),
        ]
