from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from platformdirs import user_data_dir


class PersistencePort(Protocol):
    def load(self) -> bytes | None: ...

    def save(self, data: bytes) -> None: ...

    def delete(self) -> None: ...


@dataclass
class FileQueueStore:
    """Keeps the queue as one JSON file under the platform user data dir.

    Writes go to a sibling temp file first and are swapped in with
    ``os.replace`` so a crash leaves either the old or the new queue.
    """

    app_name: str = "cashup"
    filename: str = "submission_queue.json"
    directory: str | None = None

    def _path(self) -> Path:
        base = Path(self.directory) if self.directory else Path(user_data_dir(self.app_name, "Cashup"))
        base.mkdir(parents=True, exist_ok=True)
        return base / self.filename

    @property
    def path(self) -> Path:
        return self._path()

    def load(self) -> bytes | None:
        path = self._path()
        if not path.exists():
            return None
        return path.read_bytes()

    def save(self, data: bytes) -> None:
        path = self._path()
        tmp_path = path.with_name(path.name + ".tmp")
        with open(tmp_path, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
        try:
            path.chmod(0o600)
        except OSError:
            pass

    def delete(self) -> None:
        path = self._path()
        if path.exists():
            path.unlink()


@dataclass
class MemoryQueueStore:
    data: bytes | None = None

    def load(self) -> bytes | None:
        return self.data

    def save(self, data: bytes) -> None:
        self.data = bytes(data)

    def delete(self) -> None:
        self.data = None
