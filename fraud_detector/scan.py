"""
Scan pipeline for already-extracted feed posts.

Runs: hiring-post filter → author key → role / date / fingerprint → ledger → score.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from fraud_detector.extract import (
    extract_role,
    fingerprint,
    is_hiring_post,
    normalize_profile_url,
    parse_post_date,
)
from fraud_detector.ledger import Ledger
from fraud_detector.log import get_logger
from fraud_detector.models import Author, ScoreResult
from fraud_detector.scorer import Thresholds, evaluate

log = get_logger(__name__)


@dataclass
class RawPost:
    author_url: str
    author_name: str | None
    text: str
    posted: str | None = None
    observed_at: datetime | None = None


@dataclass
class ScanOutcome:
    author: Author
    result: ScoreResult
    role: str
    date: str


def scan_post(
    ledger: Ledger,
    raw: RawPost,
    now: datetime,
    thresholds: Thresholds | None = None,
) -> ScanOutcome | None:
    """Record one post if it is a hiring post by a resolvable author, then score the author."""
    if not raw.text or not is_hiring_post(raw.text):
        return None
    url = normalize_profile_url(raw.author_url)
    if not url:
        log.debug("Skipping post with unresolvable author link %r", raw.author_url)
        return None

    name = (raw.author_name or "").split("\n")[0].strip()
    role = extract_role(raw.text)
    post_date = parse_post_date(raw.posted, now) or now.date().isoformat()
    author = ledger.record_post(
        url, name, role, post_date,
        observed_at=raw.observed_at or now,
        fingerprint=fingerprint(raw.text),
    )
    return ScanOutcome(
        author=author,
        result=evaluate(author, now, thresholds),
        role=role,
        date=post_date,
    )


def scan_posts(
    ledger: Ledger,
    posts: list[RawPost],
    now: datetime | None = None,
    thresholds: Thresholds | None = None,
) -> list[ScanOutcome]:
    now = now or datetime.now(timezone.utc)
    outcomes: list[ScanOutcome] = []
    for raw in posts:
        outcome = scan_post(ledger, raw, now, thresholds)
        if outcome is not None:
            outcomes.append(outcome)
    fake = sum(1 for o in outcomes if o.result.is_fake)
    log.info(
        "Scanned %d post(s) → %d hiring post(s) recorded, %d flagged fake",
        len(posts), len(outcomes), fake,
    )
    return outcomes


def load_raw_posts(path: Path) -> list[RawPost]:
    """Read JSON Lines with ``author_url``, ``author_name``, ``text`` and ``posted`` keys."""
    posts: list[RawPost] = []
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                row = json.loads(line)
            except ValueError as exc:
                log.warning("%s:%d is not valid JSON (%s) — skipped", path.name, lineno, exc)
                continue
            if not isinstance(row, dict):
                log.warning("%s:%d is not a JSON object — skipped", path.name, lineno)
                continue
            text = row.get("text") or ""
            if not isinstance(text, str):
                log.warning("%s:%d has non-text \"text\" — skipped", path.name, lineno)
                continue
            name = row.get("author_name")
            posts.append(
                RawPost(
                    author_url=str(row.get("author_url") or ""),
                    author_name=name if isinstance(name, str) else None,
                    text=text,
                    posted=row.get("posted"),
                )
            )
    return posts
