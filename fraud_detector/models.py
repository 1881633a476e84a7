"""Data models for tracked recruiters, their hiring posts and risk verdicts."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum

ROLE_SENTINEL = "Job Position"
UNKNOWN_NAME = "Unknown"


class Tier(str, Enum):
    UNKNOWN = "unknown"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _parse_instant(value) -> datetime | None:
    """Accept ISO strings, epoch milliseconds or datetimes; always return UTC-aware."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        dt = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    else:
        try:
            dt = datetime.fromisoformat(str(value))
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass(frozen=True)
class Post:
    role: str
    date: str
    observed_at: datetime
    fingerprint: str | None = None

    @property
    def key(self) -> tuple[str, str, str | None]:
        return (self.role, self.date, self.fingerprint)

    @property
    def day(self) -> date | None:
        """Calendar date of the post, or None when the stored date is unparsable."""
        try:
            return date.fromisoformat(self.date[:10])
        except (TypeError, ValueError):
            return None

    def to_dict(self) -> dict:
        return {
            "role": self.role,
            "date": self.date,
            "observed_at": self.observed_at.isoformat(),
            "fingerprint": self.fingerprint,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Post:
        observed = _parse_instant(data.get("observed_at", data.get("ts")))
        return cls(
            role=data.get("role") or ROLE_SENTINEL,
            date=str(data.get("date") or ""),
            observed_at=observed or datetime.now(timezone.utc),
            fingerprint=data.get("fingerprint"),
        )


@dataclass
class Author:
    identity_key: str
    display_name: str | None = None
    posts: list[Post] = field(default_factory=list)
    first_seen: datetime | None = None

    def has_post(self, post: Post) -> bool:
        return any(p.key == post.key for p in self.posts)

    def to_dict(self) -> dict:
        return {
            "identity_key": self.identity_key,
            "display_name": self.display_name,
            "first_seen": self.first_seen.isoformat() if self.first_seen else None,
            "posts": [p.to_dict() for p in self.posts],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Author:
        # Extension exports used camelCase keys and epoch-ms timestamps
        return cls(
            identity_key=data.get("identity_key") or data.get("url", ""),
            display_name=data.get("display_name", data.get("name")) or None,
            posts=[Post.from_dict(p) for p in data.get("posts", [])],
            first_seen=_parse_instant(data.get("first_seen", data.get("firstSeen"))),
        )


@dataclass
class ScoreResult:
    tier: Tier
    points: int = 0
    is_fake: bool = False
    reasons: list[str] = field(default_factory=list)
    roles: list[str] = field(default_factory=list)
    fake_narrative: str | None = None
    confidence: int | None = None
    method: str | None = None
    recent_count: int = 0
    max_day: int = 0
    role_counts: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "tier": self.tier.value,
            "points": self.points,
            "is_fake": self.is_fake,
            "reasons": list(self.reasons),
            "roles": list(self.roles),
            "fake_narrative": self.fake_narrative,
            "confidence": self.confidence,
            "method": self.method,
            "recent_count": self.recent_count,
            "max_day": self.max_day,
            "role_counts": dict(self.role_counts),
        }
