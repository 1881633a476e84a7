"""Per-author ledger of observed hiring posts, deduplicated and persisted per key."""
from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Callable, Iterator

from fraud_detector.extract import canonical_identity
from fraud_detector.log import get_logger
from fraud_detector.models import ROLE_SENTINEL, UNKNOWN_NAME, Author, Post
from fraud_detector.store import AuthorStore, MemoryStore

log = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _date_str(value: date | datetime | str) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value or "").strip()


class Ledger:
    """Owns every Author record; the scorer only ever reads snapshots.

    ``record_post`` is a read-modify-write against the store. It is serialised
    per identity key with an in-process lock and the store's own ``lock(key)``;
    writes for different authors do not wait on each other.
    """

    def __init__(
        self,
        store: AuthorStore | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store if store is not None else MemoryStore()
        self._clock = clock
        # key -> [lock, number of threads holding or waiting on it]
        self._locks: dict[str, list] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def _key_lock(self, key: str) -> Iterator[None]:
        with self._locks_guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0], self.store.lock(key):
                yield
        finally:
            with self._locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def record_post(
        self,
        identity_key: str,
        display_name: str | None,
        role: str | None,
        date: date | datetime | str,
        observed_at: datetime | None = None,
        fingerprint: str | None = None,
    ) -> Author:
        """Append a post to the author's ledger and return the updated snapshot.

        Posts are unique per (role, date, fingerprint); recording the same one
        again changes nothing. Raises PersistenceError if the store fails.
        """
        key = canonical_identity(identity_key)
        post = Post(
            role=(role or "").strip() or ROLE_SENTINEL,
            date=_date_str(date),
            observed_at=observed_at or self._clock(),
            fingerprint=fingerprint,
        )
        name = (display_name or "").strip()

        with self._key_lock(key):
            author = self.store.get(key)
            dirty = False
            if author is None:
                author = Author(identity_key=key, first_seen=self._clock())
                dirty = True
                log.info("Tracking new author %s", key)

            if name and name != UNKNOWN_NAME and name != author.display_name:
                author.display_name = name
                dirty = True

            if author.has_post(post):
                log.debug("Duplicate post for %s: %s on %s", key, post.role, post.date)
            else:
                author.posts.append(post)
                dirty = True
                log.debug("Recorded post for %s: %s on %s", key, post.role, post.date)

            if dirty:
                self.store.put(key, author)
        return author

    def get_author(self, identity_key: str) -> Author:
        """Stored snapshot, or an empty unsaved Author when the key is unknown."""
        key = canonical_identity(identity_key)
        author = self.store.get(key)
        if author is None:
            return Author(identity_key=key, first_seen=self._clock())
        return author

    def authors(self) -> list[Author]:
        out: list[Author] = []
        for key in self.store.keys():
            author = self.store.get(key)
            if author is not None:
                out.append(author)
        return out

    def reset(self) -> int:
        removed = self.store.clear()
        log.info("Ledger reset — %d author(s) removed", removed)
        return removed
