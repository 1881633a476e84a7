#!/usr/bin/env python3
"""
Command-line entry point for the recruiter fraud detector.

    python run_detector.py scan posts.jsonl    # record hiring posts, print dashboard
    python run_detector.py report              # print and save the dashboard
    python run_detector.py show <profile-url>  # one recruiter's verdict
    python run_detector.py reset               # forget every tracked recruiter

Add -v to any command for debug output.
"""
from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from fraud_detector.config import authors_dir, ensure_dirs, load_thresholds
from fraud_detector.ledger import Ledger
from fraud_detector.log import get_logger, set_level
from fraud_detector.report import build_dashboard_report, write_dashboard_report
from fraud_detector.scan import load_raw_posts, scan_posts
from fraud_detector.scorer import evaluate
from fraud_detector.store import JsonFileStore, PersistenceError

log = get_logger("fraud_detector.cli")

USAGE = __doc__.strip().splitlines()[-6:-2]


def _usage() -> int:
    print("Usage:")
    for line in USAGE:
        print(line)
    return 2


def main(argv: list[str]) -> int:
    if "-v" in argv:
        argv = [a for a in argv if a != "-v"]
        set_level(logging.DEBUG)
    if not argv:
        return _usage()
    command, args = argv[0], argv[1:]

    ensure_dirs()
    ledger = Ledger(JsonFileStore(authors_dir()))
    thresholds = load_thresholds()
    now = datetime.now(timezone.utc)

    try:
        if command == "scan" and args:
            path = Path(args[0])
            if not path.exists():
                log.error("Input file not found: %s", path)
                return 1
            scan_posts(ledger, load_raw_posts(path), now, thresholds)
            print(build_dashboard_report(ledger.authors(), now, thresholds))
        elif command == "report":
            content = build_dashboard_report(ledger.authors(), now, thresholds)
            print(content)
            write_dashboard_report(content, now)
        elif command == "show" and args:
            author = ledger.get_author(args[0])
            result = evaluate(author, now, thresholds)
            print(f"{author.display_name or author.identity_key}: {result.tier.value} ({result.points} pts)")
            for reason in result.reasons:
                print(f"  - {reason}")
            if result.fake_narrative:
                print()
                print(result.fake_narrative)
        elif command == "reset":
            removed = ledger.reset()
            print(f"Cleared {removed} tracked recruiter(s).")
        else:
            return _usage()
    except PersistenceError as exc:
        log.error("Storage failure: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
