"""Main entry point for the DPG API sync."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .config import Settings, get_settings
from .errors import DPGApiError
from .models import CommitResult, RunReport
from .pipeline import ReconciliationPipeline
from .publisher import Publisher
from .reconcile import Reconciler
from .store import RecordStore
from .sync import SyncCoordinator
from .trigger import load_changed_files, should_run

console = Console()

SKIP_MESSAGE = "No nominee files have changed or been added. Not running script."


def setup_logging(level: str, log_json: bool = False) -> None:
    """Set up logging with Rich handler or JSON lines."""
    log_level = getattr(logging, level.upper())
    if log_json:

        class JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                payload = {
                    "level": record.levelname,
                    "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%SZ"),
                    "message": record.getMessage(),
                    "name": record.name,
                }
                return json.dumps(payload)

        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logging.basicConfig(level=log_level, handlers=[handler])
    else:
        logging.basicConfig(
            level=log_level,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(console=console, rich_tracebacks=True)],
        )


logger = logging.getLogger(__name__)


def build_pipeline(settings: Settings, publish: bool = True) -> ReconciliationPipeline:
    """Wire the store, reconciler and publisher from settings."""
    store = RecordStore(settings.nominees_folder, settings.screening_folder)
    reconciler = Reconciler(store, settings.excluded_annotation_ids)
    publisher = Publisher(settings.output_dir) if publish else None
    return ReconciliationPipeline(
        store, reconciler, publisher, max_workers=settings.write_workers
    )


def sync_and_publish(settings: Settings) -> tuple[RunReport, Optional[CommitResult]]:
    """Run the full pipeline: sync the API repo, publish, then commit.

    With ``settings.dry_run`` the corpus is reconciled and counted but the
    repository is left untouched.

    Raises:
        DPGApiError: On corpus, sync or commit failures
    """
    if settings.dry_run:
        report = build_pipeline(settings, publish=False).run()
        console.print(report.summary_line())
        return report, None

    with SyncCoordinator.from_settings(settings) as coordinator:
        coordinator.ensure_working_copy()

        pipeline = build_pipeline(settings)
        report = pipeline.run()
        console.print(report.summary_line())
        if report.failed_writes:
            console.print(
                f"[yellow]{len(report.failed_writes)} file(s) could not be written; "
                "see log for details[/yellow]"
            )

        coordinator.mark_dirty()
        result = coordinator.commit(pipeline.publisher.artifact_paths())

    if result.committed:
        console.print(f"New commit: {result.commit_id}")
    else:
        console.print("Nothing to commit")
    return report, result


@click.command()
@click.option(
    "--changed-files",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON array of changed file paths (defaults to ~/files.json)",
)
@click.option(
    "--force",
    is_flag=True,
    default=False,
    help="Run even if no nominee or screening files changed",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Reconcile and count records without touching the API repository",
)
@click.option("--workers", type=click.IntRange(min=1), default=None, help="Write workers")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Set logging level",
)
def main(
    changed_files: Optional[Path],
    force: bool,
    dry_run: bool,
    workers: Optional[int],
    log_level: Optional[str],
) -> None:
    """Publish nominee and DPG records to the public goods API repository."""
    settings = get_settings()

    # Override config with CLI options
    overrides = {}
    if changed_files is not None:
        overrides["changed_files_path"] = changed_files
    if dry_run:
        overrides["dry_run"] = True
    if workers is not None:
        overrides["write_workers"] = workers
    if log_level:
        overrides["log_level"] = log_level
    if overrides:
        settings = settings.model_copy(update=overrides)

    setup_logging(settings.log_level, settings.log_json)

    try:
        if not force:
            files = load_changed_files(settings.changed_files_path)
            if not should_run(files, settings.trigger_patterns):
                console.print(SKIP_MESSAGE)
                return

        sync_and_publish(settings)

    except DPGApiError as e:
        logger.error(f"Sync failed: {e}")
        console.print(f"[red]❌ Sync failed:[/red] {escape(str(e))}")
        sys.exit(1)


if __name__ == "__main__":
    main()
