"""Flag recruiters whose hiring-post cadence looks like spam or fraud.

Usage::

    from fraud_detector import Ledger, evaluate

    ledger = Ledger()
    author = ledger.record_post(profile_url, "Jane Recruiter", "Backend Engineer", "2024-02-19")
    result = evaluate(author, now)
"""

from fraud_detector.ledger import Ledger
from fraud_detector.models import Author, Post, ScoreResult, Tier
from fraud_detector.scorer import DEFAULT_THRESHOLDS, Thresholds, evaluate
from fraud_detector.store import JsonFileStore, MemoryStore, PersistenceError

__all__ = [
    "Ledger", "Author", "Post", "ScoreResult", "Tier",
    "Thresholds", "DEFAULT_THRESHOLDS", "evaluate",
    "JsonFileStore", "MemoryStore", "PersistenceError",
]
