"""Score a recruiter's hiring-post history for fake/spam posting patterns.

Rules run in a fixed order. The first verdict rule that fires (hiring ratio,
observation window, sliding date windows) decides ``is_fake``; the point rules
after it (daily burst, role variety, role repetition, volume) always
accumulate, so a non-fake author still gets a graduated tier.
"""
from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fraud_detector.log import get_logger
from fraud_detector.models import Author, Post, ScoreResult, Tier

log = get_logger(__name__)


@dataclass(frozen=True)
class Thresholds:
    """Tunable windows, confidences and point values used by :func:`evaluate`."""

    hiring_ratio_min_posts: int = 2
    hiring_ratio_max_days: float = 7.0
    hiring_ratio_confidence: int = 85

    observation_min_posts: int = 3
    observation_max_days: float = 5.0
    observation_confidence: int = 95

    recency_windows: tuple[int, ...] = (3, 5, 7)
    # (min posts, window days, confidence), checked in order
    date_window_rules: tuple[tuple[int, int, int], ...] = (
        (5, 5, 98),
        (4, 5, 90),
        (3, 5, 80),
        (2, 3, 75),
        (5, 7, 92),
    )

    fake_points: int = 100
    daily_burst_min: int = 2
    daily_burst_points: int = 40
    role_variety_min: int = 3
    role_variety_points: int = 30
    role_repeat_min: int = 2
    role_repeat_points: int = 25
    # (min total posts, points), cumulative
    volume_bonuses: tuple[tuple[int, int], ...] = ((2, 20), (6, 15), (8, 10))

    tier_high_min: int = 45
    tier_medium_min: int = 20

    legacy_first_seen_days: int = 365


DEFAULT_THRESHOLDS = Thresholds()

METHOD_HIRING_RATIO = "hiring_ratio"
METHOD_OBSERVATION = "observation_window"
METHOD_DATE_WINDOW = "date_window"

DEFAULT_SUBJECT = "This recruiter"


@dataclass(frozen=True)
class _Verdict:
    method: str
    confidence: int
    reason: str
    count: int
    days: int


def _utc(now: datetime) -> datetime:
    return now if now.tzinfo else now.replace(tzinfo=timezone.utc)


def legacy_first_seen(now: datetime, thresholds: Thresholds | None = None) -> datetime:
    """Stand-in first_seen for records that predate first_seen tracking."""
    hp = thresholds or DEFAULT_THRESHOLDS
    return _utc(now) - timedelta(days=hp.legacy_first_seen_days)


def _days_observed(author: Author, now: datetime, hp: Thresholds) -> tuple[float, bool]:
    """Days since first observation, and whether first_seen was actually recorded."""
    known = author.first_seen is not None
    first_seen = _utc(author.first_seen) if known else legacy_first_seen(now, hp)
    return (now - first_seen).total_seconds() / 86400, known


def _window_counts(posts: list[Post], now: datetime, hp: Thresholds) -> dict[int, int]:
    """Posts dated within each trailing window; unparsable dates count nowhere."""
    today = now.date()
    counts = {days: 0 for days in hp.recency_windows}
    for p in posts:
        day = p.day
        if day is None:
            continue
        age = (today - day).days
        for days in counts:
            if age <= days:
                counts[days] += 1
    return counts


def _hiring_ratio_verdict(posts: list[Post], days: float, hp: Thresholds) -> _Verdict | None:
    if len(posts) < hp.hiring_ratio_min_posts or days > hp.hiring_ratio_max_days:
        return None
    shown = max(1, math.ceil(days))
    return _Verdict(
        method=METHOD_HIRING_RATIO,
        confidence=hp.hiring_ratio_confidence,
        reason=f"Posted {len(posts)} posts in {shown} days — all posts are hiring (100% ratio)",
        count=len(posts),
        days=shown,
    )


def _observation_verdict(
    posts: list[Post], days: float, known: bool, hp: Thresholds,
) -> _Verdict | None:
    if not known or len(posts) < hp.observation_min_posts or days > hp.observation_max_days:
        return None
    shown = max(1, math.ceil(days))
    return _Verdict(
        method=METHOD_OBSERVATION,
        confidence=hp.observation_confidence,
        reason=f"{len(posts)} hiring posts within {shown} days of first being tracked",
        count=len(posts),
        days=shown,
    )


def _date_window_verdict(counts: dict[int, int], hp: Thresholds) -> _Verdict | None:
    for min_posts, days, confidence in hp.date_window_rules:
        n = counts.get(days, 0)
        if n >= min_posts:
            return _Verdict(
                method=METHOD_DATE_WINDOW,
                confidence=confidence,
                reason=f"{n} hiring posts dated within the last {days} days",
                count=n,
                days=days,
            )
    return None


def _fake_narrative(author: Author, verdict: _Verdict) -> str:
    subject = author.display_name or DEFAULT_SUBJECT
    total = len(author.posts)
    lines = [
        "\U0001f6a8 FAKE RECRUITER DETECTED",
        f"{subject} posted {verdict.count} hiring posts in {verdict.days} days.",
        f"Reason: {verdict.reason}",
        f"Confidence: {verdict.confidence}%",
        "Genuine recruiters rarely flood feeds with openings like this. "
        "Do not apply, share documents or pay any fee before verifying the company independently.",
        f"Total posts tracked from this author: {total}",
    ]
    return "\n".join(lines)


def _tier(is_fake: bool, points: int, hp: Thresholds) -> Tier:
    if is_fake or points >= hp.tier_high_min:
        return Tier.HIGH
    if points >= hp.tier_medium_min:
        return Tier.MEDIUM
    return Tier.LOW


def evaluate(
    author: Author,
    now: datetime,
    thresholds: Thresholds | None = None,
) -> ScoreResult:
    """Score an author's recorded posts as of *now*.

    Args:
        author: Ledger snapshot; never mutated.
        now: Evaluation instant. Naive datetimes are taken as UTC.
        thresholds: Optional overrides; uses :data:`DEFAULT_THRESHOLDS` if omitted.

    Returns:
        A :class:`ScoreResult`. Authors with no posts get ``Tier.UNKNOWN``.
    """
    hp = thresholds or DEFAULT_THRESHOLDS
    posts = list(author.posts)
    if not posts:
        return ScoreResult(tier=Tier.UNKNOWN)

    now = _utc(now)
    days, known = _days_observed(author, now, hp)
    counts = _window_counts(posts, now, hp)
    recent_count = max(counts.values(), default=0)

    verdict = (
        _hiring_ratio_verdict(posts, days, hp)
        or _observation_verdict(posts, days, known, hp)
        or _date_window_verdict(counts, hp)
    )

    points = 0
    reasons: list[str] = []
    is_fake = verdict is not None
    if verdict:
        points += hp.fake_points
        reasons.append(verdict.reason)

    by_date = Counter(p.date for p in posts)
    max_day = max(by_date.values())
    if max_day >= hp.daily_burst_min:
        points += hp.daily_burst_points
        reasons.append(f"Posted {max_day} jobs in a single day")

    role_counts = Counter(p.role for p in posts if p.role)
    roles = list(role_counts)
    if len(roles) >= hp.role_variety_min:
        points += hp.role_variety_points
        reasons.append(f"{len(roles)} different roles posted")

    for role, count in role_counts.items():
        if count >= hp.role_repeat_min:
            points += hp.role_repeat_points
            reasons.append(f'"{role}" posted {count} times')

    for i, (min_posts, bonus) in enumerate(hp.volume_bonuses):
        if len(posts) >= min_posts:
            points += bonus
            if i == 0:
                reasons.append(f"All {len(posts)} tracked posts are hiring posts")
            else:
                reasons.append(f"{len(posts)} hiring posts tracked ({min_posts}+)")

    result = ScoreResult(
        tier=_tier(is_fake, points, hp),
        points=points,
        is_fake=is_fake,
        reasons=reasons,
        roles=roles,
        fake_narrative=_fake_narrative(author, verdict) if verdict else None,
        confidence=verdict.confidence if verdict else None,
        method=verdict.method if verdict else None,
        recent_count=recent_count,
        max_day=max_day,
        role_counts=dict(role_counts),
    )
    log.debug(
        "Evaluated %s: tier=%s points=%d fake=%s",
        author.identity_key, result.tier.value, points, is_fake,
    )
    return result


def summarize(results: list[ScoreResult]) -> dict[str, int]:
    """Tier and verdict counts across many evaluations."""
    tiers = Counter(r.tier for r in results)
    return {
        "total": len(results),
        "high": tiers[Tier.HIGH],
        "medium": tiers[Tier.MEDIUM],
        "low": tiers[Tier.LOW],
        "unknown": tiers[Tier.UNKNOWN],
        "fake": sum(1 for r in results if r.is_fake),
    }
