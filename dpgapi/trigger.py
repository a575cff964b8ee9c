"""Decide whether a run is needed from the list of changed files."""

import json
import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional

from .errors import TriggerError

logger = logging.getLogger(__name__)


def load_changed_files(path: Path) -> List[str]:
    """Read the JSON array of changed file paths.

    Raises:
        TriggerError: If the file is missing or does not hold a list of strings
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise TriggerError(f"Failed to read changed files from {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise TriggerError(f"Malformed changed files list in {path}: {e}") from e

    if not isinstance(data, list) or not all(isinstance(f, str) for f in data):
        raise TriggerError(f"Expected a JSON array of paths in {path}")
    return data


def first_match(files: Iterable[str], patterns: Iterable[str]) -> Optional[str]:
    """Return the first changed file matching any pattern."""
    compiled = [re.compile(pattern) for pattern in patterns]
    for changed in files:
        if any(regex.search(changed) for regex in compiled):
            return changed
    return None


def should_run(files: Iterable[str], patterns: Iterable[str]) -> bool:
    match = first_match(files, patterns)
    if match is None:
        logger.info("No nominee or screening files in the changed files list")
        return False
    logger.info(f"Changed file {match} triggers a run")
    return True
