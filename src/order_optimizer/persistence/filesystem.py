"""File-based persistence helpers for record discovery and order outputs."""

from __future__ import annotations

import json
import os
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

import yaml

from ..config import settings
from ..models.errors import ConfigSourceUnavailable, RecordFormatError

OUTPUT_DIRNAME = "outputs"


@dataclass(slots=True)
class RecordGroup:
    """Entries parsed from one record file, e.g. the orders of one day."""

    name: str
    entries: list[dict]


def load_record_file(path: Path) -> RecordGroup:
    """Parse a YAML record file into a group of mapping entries."""

    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as exc:
        raise RecordFormatError(f"Unable to read record file '{path}': {exc}") from exc

    if data is None:
        return RecordGroup(name=path.name, entries=[])
    if not isinstance(data, list) or not all(isinstance(entry, dict) for entry in data):
        raise RecordFormatError(f"Record file '{path}' must contain a list of mappings.")
    return RecordGroup(name=path.name, entries=data)


def coerce_record_int(value: Any, *, context: str) -> int:
    """Read an integer id from a record entry without truncating or accepting booleans."""

    if isinstance(value, bool):
        raise RecordFormatError(f"Invalid integer '{value}' in {context}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise RecordFormatError(f"Invalid integer '{value}' in {context}") from exc
    raise RecordFormatError(f"Invalid integer '{value}' in {context}")


class RecordDirectory:
    """Locates the order and configuration record files beneath a data root.

    Record directories are matched by name anywhere below the root, so both
    ``<root>/orders`` and ``<root>/2024/orders`` are picked up. The
    ``outputs`` run directory is never searched.
    """

    def __init__(
        self,
        root: Path | None = None,
        *,
        orders_dirname: str | None = None,
        configuration_dirname: str | None = None,
        suffixes: Sequence[str] | None = None,
    ) -> None:
        self.root = Path(root or settings.data_root)
        self.orders_dirname = orders_dirname or settings.orders_dirname
        self.configuration_dirname = configuration_dirname or settings.configuration_dirname
        self.suffixes = tuple(suffix.lower() for suffix in (suffixes or settings.record_suffixes))

    def ensure_available(self) -> None:
        if not self.root.is_dir():
            raise ConfigSourceUnavailable(f"Absolute path is not a directory! ({self.root})")

    def _directories(self, dirname: str) -> list[Path]:
        self.ensure_available()
        found: list[Path] = []
        for current, subdirs, _ in os.walk(self.root):
            # Run outputs never hold records.
            subdirs[:] = [name for name in subdirs if name != OUTPUT_DIRNAME]
            if dirname in subdirs:
                found.append(Path(current) / dirname)
        return sorted(found)

    def _files(self, dirname: str) -> list[Path]:
        files: list[Path] = []
        for directory in self._directories(dirname):
            files.extend(
                sorted(
                    path
                    for path in directory.iterdir()
                    if path.is_file() and path.suffix.lower() in self.suffixes
                )
            )
        return files

    def has_orders(self) -> bool:
        return bool(self._directories(self.orders_dirname))

    def has_configuration(self) -> bool:
        return bool(self._directories(self.configuration_dirname))

    def order_files(self) -> list[Path]:
        return self._files(self.orders_dirname)

    def configuration_files(self) -> list[Path]:
        return self._files(self.configuration_dirname)

    def configuration_entries(self) -> list[dict]:
        entries: list[dict] = []
        for path in self.configuration_files():
            entries.extend(load_record_file(path).entries)
        return entries


class FileStorage:
    """Thin wrapper around the data root for storing JSON, CSV and log outputs."""

    _append_lock = threading.Lock()

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.output_root = self.root / OUTPUT_DIRNAME

    def make_run_directory(self, prefix: str = "order") -> Path:
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        path = self.output_root / f"{prefix}_{timestamp}"
        path.mkdir(parents=True, exist_ok=False)
        return path

    def write_json(self, path: Path, data: Any, *, indent: int = 2) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=indent)

    def write_csv(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)

    def append_line(self, path: Path, line: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with self._append_lock:
            with path.open("a", encoding="utf-8") as handle:
                handle.write(line.rstrip("\n") + "\n")
