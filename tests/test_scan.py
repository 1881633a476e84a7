import json

from fraud_detector.scan import RawPost, load_raw_posts, scan_post, scan_posts
from tests.conftest import NOW

URL = "https://www.linkedin.com/in/jane-recruiter?trk=feed"


def _post(text: str, posted: str | None = "1d", url: str = URL) -> RawPost:
    return RawPost(author_url=url, author_name="Jane Recruiter\nRecruiter at Acme", text=text, posted=posted)


class TestScanPost:
    def test_non_hiring_post_is_ignored(self, ledger):
        assert scan_post(ledger, _post("Happy Friday everyone!"), NOW) is None
        assert ledger.authors() == []

    def test_unresolvable_author_is_ignored(self, ledger):
        post = _post("We are hiring: QA Tester", url="https://example.com/someone")
        assert scan_post(ledger, post, NOW) is None

    def test_records_role_date_and_name(self, ledger):
        outcome = scan_post(ledger, _post("We are hiring: Backend Engineer\nApply now", "2d"), NOW)
        assert outcome.role == "Backend Engineer"
        assert outcome.date == "2024-03-13"
        assert outcome.author.identity_key == "https://www.linkedin.com/in/jane-recruiter"
        assert outcome.author.display_name == "Jane Recruiter"
        assert outcome.result.tier.value == "low"

    def test_unparsable_stamp_falls_back_to_today(self, ledger):
        outcome = scan_post(ledger, _post("Hiring: Data Analyst\n", posted="Edited"), NOW)
        assert outcome.date == "2024-03-15"

    def test_rescanning_same_post_is_idempotent(self, ledger):
        post = _post("We are hiring: Backend Engineer\nApply now")
        scan_post(ledger, post, NOW)
        outcome = scan_post(ledger, post, NOW)
        assert len(outcome.author.posts) == 1


class TestScanPosts:
    def test_burst_of_new_posts_is_flagged(self, ledger):
        posts = [
            _post("We are hiring: Backend Engineer\nApply now", "1d"),
            _post("Hiring: Data Analyst\nDM me", "2d"),
            _post("Looking for: QA Tester\nsend your resume", "3d"),
            _post("Nice weather today", "3d"),
        ]
        outcomes = scan_posts(ledger, posts, NOW)
        assert len(outcomes) == 3
        last = outcomes[-1].result
        assert last.is_fake is True
        assert last.tier.value == "high"
        assert "Jane Recruiter" in last.fake_narrative

    def test_load_raw_posts_skips_bad_lines(self, tmp_path):
        path = tmp_path / "posts.jsonl"
        rows = [
            {"author_url": URL, "author_name": "Jane", "text": "We are hiring", "posted": "2d"},
            {"author_url": URL, "text": "Hiring: QA Tester"},
        ]
        path.write_text(
            json.dumps(rows[0]) + "\n{broken\n\n" + json.dumps(rows[1]) + "\n",
            encoding="utf-8",
        )
        posts = load_raw_posts(path)
        assert [p.text for p in posts] == ["We are hiring", "Hiring: QA Tester"]
        assert posts[1].author_name is None
        assert posts[1].posted is None

    def test_load_raw_posts_skips_non_object_rows(self, tmp_path):
        path = tmp_path / "posts.jsonl"
        good = {"author_url": URL, "author_name": "Jane", "text": "We are hiring"}
        path.write_text(
            "[]\n[1, 2]\n\"text\"\n42\n"
            + json.dumps({"author_url": URL, "text": 5}) + "\n"
            + json.dumps(good) + "\n",
            encoding="utf-8",
        )
        posts = load_raw_posts(path)
        assert [p.text for p in posts] == ["We are hiring"]
