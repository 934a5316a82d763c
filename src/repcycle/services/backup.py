"""Full backup export and import.

A backup is one JSON document::

    {"version": 1, "exportedAt": "...", "data": {<store snapshot>}}

Import replaces everything in the store, id counters included.
"""

import json
from dataclasses import dataclass
from pathlib import Path

import structlog

from ..db.store import COLLECTIONS, PlanStore
from ..errors import BackupCancelledError, BackupValidationError
from ..utils.dates import to_iso, utc_now

logger = structlog.get_logger(__name__)

BACKUP_VERSION = 1
BACKUP_DATA_KEYS = [*COLLECTIONS, "idCounters"]


@dataclass
class ValidationError:
    """One problem found in a backup document."""

    field: str
    message: str


def export_backup(store: PlanStore) -> dict:
    """Build a backup document from the current store contents."""
    return {
        "version": BACKUP_VERSION,
        "exportedAt": to_iso(utc_now()),
        "data": store.get_all_data(),
    }


def default_backup_filename() -> str:
    stamp = to_iso(utc_now()).replace(":", "-")
    return f"repcycle-backup-{stamp}.json"


def write_backup(store: PlanStore, path: Path) -> Path:
    """Write a backup to ``path``. A directory gets a timestamped file name."""
    if path.is_dir():
        path = path / default_backup_filename()
    path.write_text(json.dumps(export_backup(store), indent=2))
    logger.info("backup_exported", path=str(path))
    return path


def validate_backup(obj) -> list[ValidationError]:
    """Check the shape of a parsed backup document."""
    if not isinstance(obj, dict):
        return [ValidationError("root", "Backup is not a valid object")]

    errors = []
    version = obj.get("version")
    if not isinstance(version, (int, float)) or isinstance(version, bool):
        errors.append(ValidationError("version", "Missing version"))
    if not isinstance(obj.get("exportedAt"), str):
        errors.append(ValidationError("exportedAt", "Missing exportedAt"))

    data = obj.get("data")
    if not isinstance(data, dict):
        errors.append(ValidationError("data", "Missing data"))
        return errors

    for key in BACKUP_DATA_KEYS:
        if key not in data:
            errors.append(ValidationError(f"data.{key}", f"Missing {key}"))
        elif key in COLLECTIONS and not isinstance(data[key], list):
            errors.append(ValidationError(f"data.{key}", f"{key} must be a list"))
    return errors


async def import_backup(store: PlanStore, content: str) -> dict:
    """Validate a backup document and replace the store with it.

    Raises:
        BackupValidationError: If the content is not a usable backup

    Returns:
        The parsed backup document
    """
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        raise BackupValidationError(
            [ValidationError("root", f"Backup is not valid JSON ({e.msg})")]
        ) from e

    errors = validate_backup(parsed)
    if errors:
        logger.error("backup_invalid", errors=[f"{e.field}: {e.message}" for e in errors])
        raise BackupValidationError(errors)

    try:
        await store.replace_all(parsed["data"])
    except (KeyError, TypeError, ValueError) as e:
        raise BackupValidationError([ValidationError("data", str(e))]) from e

    logger.info("backup_imported", exported_at=parsed["exportedAt"])
    return parsed


def read_backup_file(path: Path) -> str:
    """Read a backup file. A missing file counts as a cancelled import."""
    if not path.is_file():
        raise BackupCancelledError(f"No backup file at {path}, import cancelled")
    return path.read_text()
