from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone

import pytest

os.environ.setdefault("FRAUD_DETECTOR_NO_LOG_FILE", "1")

from fraud_detector.ledger import Ledger  # noqa: E402
from fraud_detector.models import Author, Post  # noqa: E402
from fraud_detector.store import JsonFileStore, MemoryStore  # noqa: E402

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


def days_ago(n: int) -> str:
    return (NOW - timedelta(days=n)).date().isoformat()


def make_author(
    post_ages: list[int],
    roles: list[str] | None = None,
    first_seen_days: float | None = 60,
    name: str | None = "Jane Recruiter",
) -> Author:
    """Author with one post per entry in *post_ages* (days before NOW)."""
    roles = roles or ["Backend Engineer"] * len(post_ages)
    posts = [
        Post(role=role, date=days_ago(age), observed_at=NOW, fingerprint=f"post {i}")
        for i, (age, role) in enumerate(zip(post_ages, roles))
    ]
    first_seen = NOW - timedelta(days=first_seen_days) if first_seen_days is not None else None
    return Author(
        identity_key="https://www.linkedin.com/in/jane-recruiter",
        display_name=name,
        posts=posts,
        first_seen=first_seen,
    )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def ledger() -> Ledger:
    return Ledger(MemoryStore(), clock=lambda: NOW)


@pytest.fixture
def file_ledger(tmp_path) -> Ledger:
    return Ledger(JsonFileStore(tmp_path / "authors"), clock=lambda: NOW)
