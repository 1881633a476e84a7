"""Generate a Markdown dashboard of every tracked recruiter."""
from __future__ import annotations

from datetime import datetime
from pathlib import Path

from fraud_detector.config import REPORTS_DIR
from fraud_detector.log import get_logger
from fraud_detector.models import Author, ScoreResult, Tier
from fraud_detector.scorer import Thresholds, evaluate, summarize

log = get_logger(__name__)

_TIER_BADGE: dict[Tier, str] = {
    Tier.HIGH: "\U0001f6a8",
    Tier.MEDIUM: "⚠️",
    Tier.LOW: "✅",
    Tier.UNKNOWN: "❔",
}
_TIER_LABEL: dict[Tier, str] = {
    Tier.HIGH: "High risk",
    Tier.MEDIUM: "Suspicious",
    Tier.LOW: "Looks genuine",
    Tier.UNKNOWN: "No data",
}


def _plural(n: int, word: str) -> str:
    return f"{n} {word}{'' if n == 1 else 's'}"


def _name(author: Author) -> str:
    name = author.display_name or "Unknown Recruiter"
    name = name[:32] + ("…" if len(name) > 32 else "")
    return name.replace("|", "\\|").replace("[", "\\[").replace("]", "\\]")


def build_dashboard_report(
    authors: list[Author],
    now: datetime,
    thresholds: Thresholds | None = None,
) -> str:
    scored: list[tuple[Author, ScoreResult]] = [
        (a, evaluate(a, now, thresholds)) for a in authors
    ]
    scored.sort(key=lambda item: -item[1].points)
    counts = summarize([r for _, r in scored])

    lines: list[str] = [f"# Recruiter Risk Dashboard — {now.strftime('%Y-%m-%d')}", ""]
    lines.append(
        f"**{counts['high']}** high | **{counts['medium']}** medium | "
        f"**{counts['low']}** low | **{counts['fake']}** flagged fake"
    )
    lines.append("")

    if not scored:
        lines.append("_No recruiters tracked yet. Scan some hiring posts and they will appear here._")
        lines.append("")
        return "\n".join(lines)

    lines.append("| # | Recruiter | Posts | Roles | Risk | Tier | Verdict |")
    lines.append("|--:|-----------|------:|------:|-----:|------|---------|")
    for i, (author, r) in enumerate(scored, 1):
        verdict = f"FAKE ({r.recent_count} recent)" if r.is_fake else "—"
        lines.append(
            f"| {i} | {_TIER_BADGE[r.tier]} [{_name(author)}]({author.identity_key}) "
            f"| {len(author.posts)} | {len(r.roles)} | {r.points} "
            f"| {_TIER_LABEL[r.tier]} | {verdict} |"
        )
    lines.append("")

    flagged = [(a, r) for a, r in scored if r.tier == Tier.HIGH]
    if flagged:
        lines.append("---")
        lines.append("")
        lines.append("## High-Risk Details")
        lines.append("")
        for author, r in flagged:
            lines.append(f"### {_TIER_BADGE[r.tier]} {_name(author)}")
            lines.append(
                f"- **Activity:** {_plural(len(author.posts), 'post')} · {_plural(len(r.roles), 'role')}"
            )
            for reason in r.reasons:
                lines.append(f"- {reason}")
            if r.roles:
                lines.append(f"- **Roles:** {', '.join(r.roles[:8])}")
            if r.fake_narrative:
                lines.append("")
                lines.extend(f"> {line}" for line in r.fake_narrative.splitlines())
            lines.append("")

    log.info("Built dashboard: %d recruiters, %d flagged fake", counts["total"], counts["fake"])
    return "\n".join(lines)


def write_dashboard_report(content: str, now: datetime | None = None) -> Path:
    REPORTS_DIR.mkdir(parents=True, exist_ok=True)
    stamp = (now or datetime.now()).strftime("%Y-%m-%d")
    path = REPORTS_DIR / f"dashboard_{stamp}.md"
    path.write_text(content, encoding="utf-8")
    log.info("Report written → %s", path)
    return path
