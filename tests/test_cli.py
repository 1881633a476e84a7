import json

import pytest

import run_detector

URL = "https://www.linkedin.com/in/jane-recruiter"


@pytest.fixture(autouse=True)
def isolated_data(tmp_path, monkeypatch):
    monkeypatch.setenv("FRAUD_DETECTOR_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setattr(run_detector, "ensure_dirs", lambda: None)
    monkeypatch.setattr("fraud_detector.report.REPORTS_DIR", tmp_path / "reports")


def test_no_arguments_prints_usage(capsys):
    assert run_detector.main([]) == 2
    assert "Usage:" in capsys.readouterr().out


def test_scan_show_reset(tmp_path, capsys):
    path = tmp_path / "posts.jsonl"
    lines = [
        {"author_url": URL, "author_name": "Jane", "text": "We are hiring: Backend Engineer\n", "posted": "1d"},
        {"author_url": URL, "author_name": "Jane", "text": "Hiring: Data Analyst\n", "posted": "2d"},
    ]
    path.write_text("\n".join(json.dumps(line) for line in lines), encoding="utf-8")

    assert run_detector.main(["scan", str(path)]) == 0
    assert "Jane" in capsys.readouterr().out

    assert run_detector.main(["show", URL + "?trk=x"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Jane: high")
    assert "FAKE RECRUITER DETECTED" in out

    assert run_detector.main(["reset"]) == 0
    assert "Cleared 1 tracked recruiter(s)." in capsys.readouterr().out


def test_report_writes_file(tmp_path, capsys):
    assert run_detector.main(["report"]) == 0
    assert "No recruiters tracked yet" in capsys.readouterr().out
    assert list((tmp_path / "reports").glob("dashboard_*.md"))


def test_missing_input_file(tmp_path):
    assert run_detector.main(["scan", str(tmp_path / "absent.jsonl")]) == 1
