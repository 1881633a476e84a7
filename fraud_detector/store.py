"""Author record stores: in-memory and one-JSON-file-per-author with file locking."""
from __future__ import annotations

import fcntl
import hashlib
import json
import os
from abc import ABC, abstractmethod
from contextlib import contextmanager, nullcontext
from pathlib import Path
from typing import ContextManager, Iterator

from fraud_detector.log import get_logger
from fraud_detector.models import Author

log = get_logger(__name__)


class PersistenceError(RuntimeError):
    """The author store could not read or write a record."""


class AuthorStore(ABC):
    @abstractmethod
    def get(self, key: str) -> Author | None:
        pass

    @abstractmethod
    def put(self, key: str, author: Author) -> None:
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        pass

    @abstractmethod
    def clear(self) -> int:
        pass

    def lock(self, key: str) -> ContextManager:
        """Hold for the duration of a read-modify-write on *key*."""
        return nullcontext()


class MemoryStore(AuthorStore):
    """Dict-backed store; records are copied in and out through their dict form."""

    def __init__(self) -> None:
        self._data: dict[str, dict] = {}

    def get(self, key: str) -> Author | None:
        raw = self._data.get(key)
        return Author.from_dict(raw) if raw is not None else None

    def put(self, key: str, author: Author) -> None:
        self._data[key] = author.to_dict()

    def keys(self) -> list[str]:
        return list(self._data)

    def clear(self) -> int:
        n = len(self._data)
        self._data.clear()
        return n


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


class JsonFileStore(AuthorStore):
    """One ``<hash>.json`` document per author under *root*.

    Writes go to a temp file and are swapped in with ``os.replace`` so readers
    never see a half-written record. ``lock(key)`` takes an exclusive flock on a
    sibling ``.lock`` file, which serialises writers across processes.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def _stem(self, key: str) -> str:
        return hashlib.sha256(key.encode("utf-8")).hexdigest()[:24]

    def _path(self, key: str) -> Path:
        return self.root / f"{self._stem(key)}.json"

    def _ensure_root(self) -> None:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Cannot create store directory {self.root}: {exc}") from exc

    @contextmanager
    def lock(self, key: str) -> Iterator[None]:
        self._ensure_root()
        lock_path = self.root / f"{self._stem(key)}.lock"
        try:
            f = open(lock_path, "a", encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Cannot open lock for {key}: {exc}") from exc
        with f:
            _lock(f)
            try:
                yield
            finally:
                _unlock(f)

    def get(self, key: str) -> Author | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return Author.from_dict(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Cannot read record for {key}: {exc}") from exc
        except (AttributeError, TypeError, KeyError) as exc:
            raise PersistenceError(f"Malformed record for {key}: {exc}") from exc

    def put(self, key: str, author: Author) -> None:
        self._ensure_root()
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        try:
            tmp.write_text(json.dumps(author.to_dict(), indent=2), encoding="utf-8")
            os.replace(tmp, path)
        except OSError as exc:
            raise PersistenceError(f"Cannot write record for {key}: {exc}") from exc
        log.debug("Stored %s → %s", key, path.name)

    def keys(self) -> list[str]:
        if not self.root.exists():
            return []
        out: list[str] = []
        for path in sorted(self.root.glob("*.json")):
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
                out.append(data.get("identity_key", ""))
            except (OSError, ValueError) as exc:
                raise PersistenceError(f"Cannot read {path.name}: {exc}") from exc
            except AttributeError as exc:
                raise PersistenceError(f"Malformed record {path.name}: {exc}") from exc
        return out

    def clear(self) -> int:
        if not self.root.exists():
            return 0
        removed = 0
        try:
            for path in self.root.glob("*.json"):
                path.unlink()
                removed += 1
            for path in self.root.glob("*.lock"):
                path.unlink()
        except OSError as exc:
            raise PersistenceError(f"Cannot clear store {self.root}: {exc}") from exc
        log.info("Cleared %d author record(s) from %s", removed, self.root)
        return removed
