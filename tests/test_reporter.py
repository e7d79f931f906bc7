"""
tests/test_reporter.py — Unit tests for Reporter.

Only pure data-manipulation behaviour is tested (submissions list, JSON
serialisation). Rich console output is not asserted on beyond not failing.
"""
import json

from Form import Form
from Models import Submission
from Parser import build_catalog, find_forms
from Reporter import Reporter


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_reporter(tmp_path) -> Reporter:
    return Reporter(output_file=str(tmp_path / "submissions.json"))


def make_submission(**kwargs) -> Submission:
    defaults = dict(
        method="POST",
        url="https://example.com/signup",
        enctype="application/x-www-form-urlencoded",
        pairs=[("age", "55"), ("submit", "go")],
        status=200,
    )
    defaults.update(kwargs)
    return Submission(**defaults)


# ---------------------------------------------------------------------------
# Initial state
# ---------------------------------------------------------------------------


class TestInitialState:
    def test_submissions_starts_empty(self, tmp_path):
        assert make_reporter(tmp_path).submissions == []

    def test_output_file_stored(self, tmp_path):
        out = str(tmp_path / "out.json")
        assert Reporter(output_file=out).output_file == out

    def test_output_file_optional(self):
        assert Reporter().output_file is None


# ---------------------------------------------------------------------------
# log_submission / print_form
# ---------------------------------------------------------------------------


class TestLogSubmission:
    def test_appends_in_order(self, tmp_path):
        r = make_reporter(tmp_path)
        for status in (200, 302, 500):
            r.log_submission(make_submission(status=status))
        assert [s.status for s in r.submissions] == [200, 302, 500]

    def test_markup_in_url_does_not_break_output(self, tmp_path):
        r = make_reporter(tmp_path)
        r.log_submission(make_submission(url="https://example.com/[bold]x"))
        assert len(r.submissions) == 1


class TestPrintForm:
    def test_prints_every_kind(self, tmp_path):
        html = (
            '<form name="f"><input name="age" value="1">'
            '<input type="radio" name="g" value="a">'
            '<input type="checkbox" name="c" checked>'
            '<select name="s" multiple><option selected>x</option></select>'
            '<input type="submit" name="go" value="Go"></form>'
        )
        form = Form(build_catalog(find_forms(html)[0]))
        make_reporter(tmp_path).print_form(form)


# ---------------------------------------------------------------------------
# save
# ---------------------------------------------------------------------------


class TestSave:
    def test_save_creates_file(self, tmp_path):
        r = make_reporter(tmp_path)
        r.save()
        assert (tmp_path / "submissions.json").exists()

    def test_save_with_no_submissions_writes_empty_list(self, tmp_path):
        r = make_reporter(tmp_path)
        r.save()
        assert json.loads((tmp_path / "submissions.json").read_text()) == []

    def test_save_preserves_pairs_in_order(self, tmp_path):
        r = make_reporter(tmp_path)
        r.log_submission(make_submission(pairs=[("count", "5"), ("count", "1")]))
        r.save()
        data = json.loads((tmp_path / "submissions.json").read_text())
        assert data[0]["pairs"] == [["count", "5"], ["count", "1"]]

    def test_save_preserves_fields(self, tmp_path):
        r = make_reporter(tmp_path)
        r.log_submission(make_submission())
        r.save()
        data = json.loads((tmp_path / "submissions.json").read_text())
        assert data[0]["method"] == "POST"
        assert data[0]["url"] == "https://example.com/signup"
        assert data[0]["status"] == 200
        assert data[0]["timestamp"]

    def test_save_is_idempotent(self, tmp_path):
        r = make_reporter(tmp_path)
        r.log_submission(make_submission())
        r.save()
        r.save()
        data = json.loads((tmp_path / "submissions.json").read_text())
        assert len(data) == 1

    def test_save_without_output_file_writes_nothing(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        Reporter().save()
        assert list(tmp_path.iterdir()) == []
