"""Turn raw post text, author links and timestamps into ledger-ready values."""
from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta
from urllib.parse import urlparse

from fraud_detector.models import ROLE_SENTINEL

HIRING_KEYWORDS: list[str] = [
    "hiring", "we are hiring", "is hiring", "join us", "job opening", "job opportunity",
    "immediate joiner", "urgent hiring", "looking for", "vacancy", "opening for",
    "apply now", "send your resume", "send cv", "share your resume", "dm me",
    "interested candidates", "walk in", "walkin", "freshers", "experienced",
    "recruiter", "recruitment",
]

_ROLE_PATTERNS: list[re.Pattern] = [
    re.compile(
        r"(?:hiring|looking\s+for|opening\s+for|role\s*[:\-]?|position\s*[:\-]?)[\s:–\-]+"
        r"([A-Za-z][\w\s/+#]{2,45}?)(?:\s*[\n\r|,!?]|$)",
        re.IGNORECASE | re.MULTILINE,
    ),
    re.compile(
        r"([A-Za-z][\w\s/+#]{2,40}?)\s+(?:engineer|developer|analyst|designer|manager|lead"
        r"|architect|consultant|specialist|intern|associate|executive|officer|tester|qa"
        r"|devops|sde|swe)",
        re.IGNORECASE,
    ),
    re.compile(
        r"#([A-Za-z]\w{2,30}(?:Engineer|Developer|Analyst|Manager|Designer|Lead|Architect"
        r"|Intern|Associate|Executive|Tester|QA|DevOps|SDE|SWE))",
        re.IGNORECASE,
    ),
]

_PROFILE_PATH_RE = re.compile(r"^/(in|company)/([^/?#]+)")
_WS_RE = re.compile(r"\s+")

_NOW_RE = re.compile(r"just now|moment|\d+\s*(?:min|m\b|h|sec|s\b)")
_DAYS_RE = re.compile(r"(\d+)\s*d")
_WEEKS_RE = re.compile(r"(\d+)\s*w")
_MONTHS_RE = re.compile(r"(\d+)\s*mo")
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")

FINGERPRINT_CHARS = 120


def is_hiring_post(text: str) -> bool:
    lower = (text or "").lower()
    return any(k in lower for k in HIRING_KEYWORDS)


def extract_role(text: str) -> str:
    """Best-effort job title from post text; ``"Job Position"`` when nothing matches."""
    for pat in _ROLE_PATTERNS:
        m = pat.search(text or "")
        if m:
            role = _WS_RE.sub(" ", m.group(1)).strip()
            if 2 < len(role) < 60:
                return role
    return ROLE_SENTINEL


def _months_back(day: date, months: int) -> date:
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


def parse_post_date(value, now: datetime) -> str | None:
    """Resolve a publish stamp to an ISO date.

    Accepts dates, datetimes, ISO strings (``2024-02-19`` or a full timestamp)
    and feed-style relative stamps such as ``"3h"``, ``"2d ago"``, ``"1w"`` or
    ``"2mo"``. Returns None when the value cannot be interpreted.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    text = str(value).strip().lower()
    if not text:
        return None
    if _ISO_DATE_RE.match(text):
        try:
            return date.fromisoformat(text[:10]).isoformat()
        except ValueError:
            return None

    today = now.date()
    # Months before minutes so "2mo" is not read as "2m"
    m = _MONTHS_RE.search(text)
    if m:
        return _months_back(today, int(m.group(1))).isoformat()
    if _NOW_RE.search(text):
        return today.isoformat()
    m = _DAYS_RE.search(text)
    if m:
        return (today - timedelta(days=int(m.group(1)))).isoformat()
    m = _WEEKS_RE.search(text)
    if m:
        return (today - timedelta(weeks=int(m.group(1)))).isoformat()
    return None


def normalize_profile_url(href: str) -> str | None:
    """Canonical ``https://www.linkedin.com/<in|company>/<slug>`` form, or None."""
    try:
        parsed = urlparse((href or "").strip())
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    m = _PROFILE_PATH_RE.match(parsed.path)
    if not m:
        return None
    return f"https://www.linkedin.com/{m.group(1)}/{m.group(2)}"


def canonical_identity(key: str) -> str:
    """Stable author key: profile URL form when possible, else the key minus query/fragment."""
    raw = (key or "").strip()
    url = normalize_profile_url(raw)
    if url:
        return url
    return raw.split("#", 1)[0].split("?", 1)[0].rstrip("/")


def fingerprint(text: str) -> str | None:
    collapsed = _WS_RE.sub(" ", text or "").strip().lower()
    return collapsed[:FINGERPRINT_CHARS] or None
