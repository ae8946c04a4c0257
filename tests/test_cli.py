"""
Tests for the command-line driver.

The page is read from a saved file or a patched fetch, and the upload goes
to a patched storage function, so no network access is needed.
"""
import json

import pytest

import dmkt_schedule.cli as cli
from dmkt_schedule.errors import FetchError

from test_schedule_html import make_schedule_html

MARKER_LINE = "「アイカツアカデミー！配信部」デミカツ通信"

PAGE = make_schedule_html(
    ["2024.2", "2024.3"],
    [("1", ["10:00〜朝の会"]), ("28", ["お休み"]), ("1", [MARKER_LINE])],
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SCHEDULE_URL", "GCS_BUCKET", "GCS_PATH", "TIMEZONE", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def page_file(tmp_path):
    path = tmp_path / "schedule.html"
    path.write_text(PAGE, encoding="utf-8")
    return path


def test_html_to_local_json(page_file, tmp_path):
    out = tmp_path / "events.json"
    assert cli.main(["--html", str(page_file), "-o", str(out), "-f", "json"]) == 0

    events = json.loads(out.read_text(encoding="utf-8"))
    assert [e["title"] for e in events] == ["朝の会", "お休み", MARKER_LINE]
    assert events[2]["start"] == "2024-03-01T20:00:00"


def test_rerun_produces_same_uids(page_file, tmp_path):
    first, second = tmp_path / "a.json", tmp_path / "b.json"
    cli.main(["--html", str(page_file), "-o", str(first), "-f", "json"])
    cli.main(["--html", str(page_file), "-o", str(second), "-f", "json"])
    uids = lambda p: [e["uid"] for e in json.loads(p.read_text(encoding="utf-8"))]
    assert uids(first) == uids(second)


def test_fetch_and_upload(monkeypatch):
    monkeypatch.setenv("GCS_BUCKET", "bucket")
    monkeypatch.setenv("GCS_PATH", "feeds/dmkt.ics")
    fetched, uploaded = [], []

    def fake_fetch(url):
        fetched.append(url)
        return PAGE.encode("utf-8")

    def fake_upload(data, bucket, path, content_type=None):
        uploaded.append((data, bucket, path, content_type))

    monkeypatch.setattr(cli, "fetch_schedule_html", fake_fetch)
    monkeypatch.setattr(cli, "upload_calendar", fake_upload)

    assert cli.main(["--url", "https://example.com/schedule/"]) == 0
    assert fetched == ["https://example.com/schedule/"]
    data, bucket, path, content_type = uploaded[0]
    assert (bucket, path, content_type) == ("bucket", "feeds/dmkt.ics", "text/calendar")
    assert data.count(b"BEGIN:VEVENT") == 3


def test_missing_storage_config_fails(monkeypatch, page_file):
    monkeypatch.setattr(cli, "upload_calendar", lambda *a, **k: pytest.fail("should not upload"))
    assert cli.main(["--html", str(page_file)]) == 1


def test_structure_error_fails(tmp_path):
    page = tmp_path / "broken.html"
    page.write_text("<html><body><p>メンテナンス中</p></body></html>", encoding="utf-8")
    assert cli.main(["--html", str(page), "-o", str(tmp_path / "out.ics")]) == 1
    assert not (tmp_path / "out.ics").exists()


def test_fetch_error_fails(monkeypatch, tmp_path):
    def boom(url):
        raise FetchError("offline")

    monkeypatch.setattr(cli, "fetch_schedule_html", boom)
    assert cli.main(["-o", str(tmp_path / "out.ics")]) == 1


def test_missing_html_file_fails(tmp_path):
    assert cli.main(["--html", str(tmp_path / "nope.html"), "-o", str(tmp_path / "out.ics")]) == 1


def test_upload_requires_ics():
    with pytest.raises(SystemExit) as ctx:
        cli.main(["-f", "json"])
    assert ctx.value.code != 0


def test_out_of_range_time_fails_with_step(tmp_path, capsys):
    page = tmp_path / "schedule.html"
    page.write_text(
        make_schedule_html(["2024.3"], [("1", ["100000000:00〜x"])]), encoding="utf-8"
    )
    assert cli.main(["--html", str(page), "-o", str(tmp_path / "out.ics")]) == 1

    last = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert last["severity"] == "ERROR"
    assert last["step"] == "normalize"
    assert last["error"] == "DurationError"


def test_export_log_line(page_file, tmp_path, capsys):
    out = tmp_path / "schedule.ics"
    assert cli.main(["--html", str(page_file), "-o", str(out)]) == 0

    lines = [json.loads(l) for l in capsys.readouterr().out.strip().splitlines()]
    exported = [l for l in lines if l["message"].startswith("Exported")]
    assert exported[0]["message"] == f"Exported 3 event(s) to {out}"
    assert exported[0]["format"] == "ics"
