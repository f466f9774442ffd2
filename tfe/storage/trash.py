"""Recoverable delete: a trash content directory plus a JSON sidecar.

Each trashed item is renamed into the trash directory under a
``YYYYmmdd_HHMMSS_<name>`` key and described by one ``TrashRecord``.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from ..errors import TrashIoError
from ..file_model.types import FileEntry
from . import paths

log = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


@dataclass(frozen=True)
class TrashRecord:
    original_path: Path
    trashed_path: Path
    deleted_at: datetime
    original_name: str
    is_dir: bool
    size: int

    def to_json(self) -> dict[str, object]:
        return {
            "original_path": str(self.original_path),
            "trashed_path": str(self.trashed_path),
            "deleted_at": self.deleted_at.isoformat(),
            "original_name": self.original_name,
            "is_dir": self.is_dir,
            "size": self.size,
        }

    @classmethod
    def from_json(cls, data: object) -> TrashRecord | None:
        if not isinstance(data, dict):
            return None
        try:
            deleted_at = datetime.fromisoformat(str(data["deleted_at"]).replace("Z", "+00:00"))
            if deleted_at.tzinfo is None:
                deleted_at = deleted_at.replace(tzinfo=timezone.utc)
            return cls(
                original_path=Path(str(data["original_path"])),
                trashed_path=Path(str(data["trashed_path"])),
                deleted_at=deleted_at,
                original_name=str(data.get("original_name") or Path(str(data["original_path"])).name),
                is_dir=bool(data.get("is_dir", False)),
                size=int(data.get("size", 0) or 0),
            )
        except (KeyError, TypeError, ValueError):
            return None


def path_size(path: Path) -> int:
    """Total bytes under ``path`` without following symlinks."""
    if path.is_symlink() or not path.is_dir():
        try:
            return path.lstat().st_size
        except OSError:
            return 0
    total = 0
    for root, _dirs, files in os.walk(path):
        for name in files:
            try:
                total += os.lstat(os.path.join(root, name)).st_size
            except OSError:
                continue
    return total


def _remove_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


class TrashStore:
    def __init__(self, metadata_path: Path | None = None, trash_dir: Path | None = None) -> None:
        self.metadata_path = metadata_path if metadata_path is not None else paths.TRASH_METADATA_PATH
        self.trash_dir = trash_dir if trash_dir is not None else paths.TRASH_DIR

    def load_records(self) -> list[TrashRecord]:
        """Read the sidecar; malformed content or records are ignored."""
        data = paths.read_json(self.metadata_path)
        if not isinstance(data, list):
            return []
        records = [TrashRecord.from_json(item) for item in data]
        return [record for record in records if record is not None]

    def save_records(self, records: list[TrashRecord]) -> None:
        try:
            paths.write_json(self.metadata_path, [record.to_json() for record in records])
        except OSError as exc:
            raise TrashIoError(f"Could not update trash metadata: {exc.strerror or exc}") from exc

    def list_records(self) -> list[TrashRecord]:
        """Records ordered newest first."""
        return sorted(self.load_records(), key=lambda record: record.deleted_at, reverse=True)

    def _unique_destination(self, name: str, now: datetime) -> Path:
        base = f"{now.strftime(TIMESTAMP_FORMAT)}_{name}"
        candidate = self.trash_dir / base
        counter = 1
        while candidate.exists() or candidate.is_symlink():
            candidate = self.trash_dir / f"{base}_{counter}"
            counter += 1
        return candidate

    def move_to_trash(self, path: Path, now: datetime | None = None) -> TrashRecord:
        """Move ``path`` into the trash and record it.

        If the metadata cannot be written the move is rolled back before
        ``TrashIoError`` is raised.
        """
        source = path.absolute()
        if not source.exists() and not source.is_symlink():
            raise TrashIoError(f"Cannot trash {source.name}: no such file")
        moment = now if now is not None else datetime.now(timezone.utc)
        is_dir = source.is_dir() and not source.is_symlink()
        size = path_size(source)
        try:
            self.trash_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise TrashIoError(f"Cannot create trash directory: {exc.strerror or exc}") from exc

        destination = self._unique_destination(source.name, moment)
        try:
            shutil.move(str(source), str(destination))
        except OSError as exc:
            raise TrashIoError(f"Cannot move {source.name} to trash: {exc.strerror or exc}") from exc

        record = TrashRecord(
            original_path=source,
            trashed_path=destination,
            deleted_at=moment,
            original_name=source.name,
            is_dir=is_dir,
            size=size,
        )
        try:
            self.save_records([*self.load_records(), record])
        except TrashIoError:
            try:
                shutil.move(str(destination), str(source))
            except OSError as rollback_exc:
                log.debug("trash rollback failed for %s: %s", destination, rollback_exc)
            raise
        log.debug("trashed %s -> %s", source, destination)
        return record

    def _find(self, records: list[TrashRecord], trashed_path: Path) -> TrashRecord:
        for record in records:
            if record.trashed_path == trashed_path:
                return record
        raise TrashIoError(f"No trash record for {trashed_path.name}")

    def restore(self, trashed_path: Path) -> Path:
        """Move a trashed item back to its original location."""
        records = self.load_records()
        record = self._find(records, trashed_path)
        target = record.original_path
        if target.exists() or target.is_symlink():
            raise TrashIoError(f"Cannot restore: {target} already exists")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(record.trashed_path), str(target))
        except OSError as exc:
            raise TrashIoError(f"Cannot restore {record.original_name}: {exc.strerror or exc}") from exc
        try:
            self.save_records([item for item in records if item is not record])
        except TrashIoError:
            try:
                shutil.move(str(target), str(record.trashed_path))
            except OSError as rollback_exc:
                log.debug("restore rollback failed for %s: %s", target, rollback_exc)
            raise
        return target

    def permanently_delete(self, trashed_path: Path) -> None:
        records = self.load_records()
        record = self._find(records, trashed_path)
        try:
            if record.trashed_path.exists() or record.trashed_path.is_symlink():
                _remove_path(record.trashed_path)
        except OSError as exc:
            raise TrashIoError(f"Cannot delete {record.original_name}: {exc.strerror or exc}") from exc
        self.save_records([item for item in records if item is not record])

    def _purge(self, doomed: list[TrashRecord], keep: list[TrashRecord]) -> int:
        failed: list[TrashRecord] = []
        for record in doomed:
            try:
                if record.trashed_path.exists() or record.trashed_path.is_symlink():
                    _remove_path(record.trashed_path)
            except OSError as exc:
                log.debug("cannot purge %s: %s", record.trashed_path, exc)
                failed.append(record)
        self.save_records(keep + failed)
        if failed:
            raise TrashIoError(f"Could not remove {len(failed)} trashed item(s)")
        return len(doomed)

    def empty(self) -> int:
        """Permanently remove every trashed item; return how many were removed."""
        return self._purge(self.load_records(), [])

    def cleanup_older_than(self, cutoff: datetime) -> int:
        """Permanently remove items deleted before ``cutoff``."""
        if cutoff.tzinfo is None:
            cutoff = cutoff.replace(tzinfo=timezone.utc)
        records = self.load_records()
        doomed = [record for record in records if record.deleted_at < cutoff]
        keep = [record for record in records if record.deleted_at >= cutoff]
        return self._purge(doomed, keep)

    def total_size(self) -> int:
        return sum(record.size for record in self.load_records())

    def entries(self) -> list[FileEntry]:
        """Render records as listing rows for the trash view."""
        rows: list[FileEntry] = []
        for record in self.list_records():
            rows.append(
                FileEntry(
                    name=record.original_name,
                    path=record.original_path,
                    is_dir=record.is_dir,
                    size=record.size,
                    modified=record.deleted_at.timestamp(),
                    trashed_path=record.trashed_path,
                )
            )
        return rows
