from datetime import datetime, timezone

import pytest

from fraud_detector.extract import (
    canonical_identity,
    extract_role,
    fingerprint,
    is_hiring_post,
    normalize_profile_url,
    parse_post_date,
)
from fraud_detector.models import ROLE_SENTINEL
from tests.conftest import NOW


class TestHiringPost:
    @pytest.mark.parametrize("text", [
        "We are HIRING! Send your resume to jobs@example.com",
        "Urgent requirement, immediate joiner needed",
        "Interested candidates DM me",
    ])
    def test_hiring_text(self, text):
        assert is_hiring_post(text) is True

    @pytest.mark.parametrize("text", ["Happy Friday everyone!", "", None])
    def test_other_text(self, text):
        assert is_hiring_post(text) is False


class TestExtractRole:
    def test_explicit_hiring_prefix(self):
        assert extract_role("We are hiring: Backend Engineer\nApply now") == "Backend Engineer"

    def test_opening_for(self):
        assert extract_role("Urgent opening for Data Analyst, Pune") == "Data Analyst"

    def test_hashtag_title(self):
        assert extract_role("Great opportunity! #SeniorDevOps") == "SeniorDevOps"

    def test_no_role(self):
        assert extract_role("Happy Friday everyone") == ROLE_SENTINEL
        assert extract_role("") == ROLE_SENTINEL


class TestParsePostDate:
    @pytest.mark.parametrize("value, expected", [
        ("2024-02-19", "2024-02-19"),
        ("2024-02-19T10:00:00.000Z", "2024-02-19"),
        ("just now", "2024-03-15"),
        ("5m", "2024-03-15"),
        ("3h", "2024-03-15"),
        ("2 hours ago", "2024-03-15"),
        ("2d", "2024-03-13"),
        ("3 days ago", "2024-03-12"),
        ("1w", "2024-03-08"),
        ("2mo", "2024-01-15"),
    ])
    def test_recognised(self, value, expected):
        assert parse_post_date(value, NOW) == expected

    @pytest.mark.parametrize("value", [None, "", "yesterday", "2024-13-45"])
    def test_unrecognised(self, value):
        assert parse_post_date(value, NOW) is None

    def test_month_end_clamps(self):
        now = datetime(2024, 3, 31, 9, 0, tzinfo=timezone.utc)
        assert parse_post_date("1mo", now) == "2024-02-29"

    def test_date_and_datetime_values(self):
        assert parse_post_date(NOW, NOW) == "2024-03-15"
        assert parse_post_date(NOW.date(), NOW) == "2024-03-15"


class TestIdentity:
    @pytest.mark.parametrize("href, expected", [
        ("https://www.linkedin.com/in/jane-doe-123/?trk=feed", "https://www.linkedin.com/in/jane-doe-123"),
        ("https://linkedin.com/company/acme/posts", "https://www.linkedin.com/company/acme"),
        ("https://www.linkedin.com/in/jane#about", "https://www.linkedin.com/in/jane"),
    ])
    def test_profile_urls(self, href, expected):
        assert normalize_profile_url(href) == expected

    @pytest.mark.parametrize("href", ["https://example.com/about", "not a url", "", None])
    def test_non_profile_urls(self, href):
        assert normalize_profile_url(href) is None

    def test_canonical_identity_fallback(self):
        assert canonical_identity("  recruiter-42?utm=x ") == "recruiter-42"
        assert canonical_identity("https://www.linkedin.com/in/jane/?x=1") == "https://www.linkedin.com/in/jane"


class TestFingerprint:
    def test_collapses_whitespace_and_case(self):
        assert fingerprint("  We ARE\n\nhiring   now ") == "we are hiring now"

    def test_truncates(self):
        assert len(fingerprint("x" * 500)) == 120

    def test_empty(self):
        assert fingerprint("   ") is None
