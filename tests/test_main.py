"""
tests/test_main.py — Unit tests for the CLI: argument parsing, step
application and a full run against an in-process echo server.
"""

import httpx
import pytest

import main
from Form import Form
from Parser import build_catalog, find_forms


FORM_HTML = """
<form method="post" name="default">
    <input type="text" name="age" value="" />
    <input type="radio" name="gender" value="male" />
    <input type="radio" name="gender" value="female" />
    <input type="checkbox" name="option1" value="on" />
    <select name="count" multiple>
        <option value="1" selected>One</option>
        <option value="3" selected>Three</option>
        <option value="5">Five</option>
    </select>
    <input type="submit" name="submit" value="submitted1" />
    <input type="submit" name="submit" value="submitted2" />
</form>
"""


def parse(*argv: str):
    return main.build_arg_parser().parse_args(["--url", "http://testserver/", *argv])


def make_form() -> Form:
    return Form(build_catalog(find_forms(FORM_HTML)[0], "http://testserver/"))


def echo_transport(seen: list) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            seen.append(request.content.decode())
            return httpx.Response(200, text=request.content.decode())
        return httpx.Response(200, html=FORM_HTML)

    return httpx.MockTransport(handler)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


class TestArgParser:
    def test_defaults(self):
        args = parse()
        assert args.form == "form"
        assert args.steps == []
        assert args.click is None
        assert args.dry_run is False
        assert args.verify is True
        assert args.output is None

    def test_steps_keep_command_line_order(self):
        args = parse("--check", "option1", "--set", "gender=male", "--input", "age=55")
        assert args.steps == [
            ("check", "option1", ""),
            ("set", "gender", "male"),
            ("input", "age", "55"),
        ]

    def test_value_may_contain_equals(self):
        args = parse("--input", "age=a=b")
        assert args.steps == [("input", "age", "a=b")]

    def test_pair_step_without_equals_is_rejected(self):
        with pytest.raises(SystemExit):
            parse("--set", "gender")

    def test_click_and_dry_run_are_exclusive(self):
        with pytest.raises(SystemExit):
            parse("--click", "submit", "--dry-run")

    def test_url_is_required(self):
        with pytest.raises(SystemExit):
            main.build_arg_parser().parse_args([])


# ---------------------------------------------------------------------------
# apply_steps
# ---------------------------------------------------------------------------


class TestApplySteps:
    def test_applies_each_kind(self):
        form = make_form()
        main.apply_steps(form, parse(
            "--input", "age=55",
            "--set", "gender=female",
            "--check", "option1",
            "--deselect", "count=1",
        ).steps)
        assert form.data_set() == [
            ("age", "55"),
            ("gender", "female"),
            ("option1", "on"),
            ("count", "3"),
        ]

    def test_consecutive_selects_merge_in_order(self):
        form = make_form()
        main.apply_steps(form, parse("--select", "count=5", "--select", "count=1").steps)
        assert form.select_values("count") == ["5", "1"]

    def test_interleaved_selects_accumulate(self):
        form = make_form()
        main.apply_steps(form, parse(
            "--select", "count=5", "--input", "age=1", "--select", "count=1"
        ).steps)
        assert form.select_values("count") == ["5", "1"]
        assert form.value("age") == "1"

    def test_select_by_label(self):
        form = make_form()
        main.apply_steps(form, parse("--select-label", "count=Five").steps)
        assert form.select_values("count") == ["5"]

    def test_uncheck_and_remove(self):
        form = make_form()
        main.apply_steps(form, parse(
            "--check", "option1", "--uncheck", "option1", "--remove", "age"
        ).steps)
        assert form.data_set() == [("count", "1"), ("count", "3")]

    def test_unknown_step_kind(self):
        with pytest.raises(ValueError):
            main.apply_steps(make_form(), [("explode", "x", "")])


# ---------------------------------------------------------------------------
# parse_headers
# ---------------------------------------------------------------------------


class TestParseHeaders:
    def test_parses_name_value(self):
        assert main.parse_headers(["X-Test: 1", "Accept:text/html"]) == {
            "X-Test": "1",
            "Accept": "text/html",
        }

    def test_skips_malformed(self):
        assert main.parse_headers(["nonsense", ": empty"]) == {}


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


class TestRun:
    def test_click_by_value(self):
        seen: list = []
        code = main.run(
            parse("--input", "age=55", "--click", "submit=submitted2"),
            transport=echo_transport(seen),
        )
        assert code == 0
        assert seen == ["age=55&count=1&count=3&submit=submitted2"]

    def test_default_submit(self):
        seen: list = []
        assert main.run(parse(), transport=echo_transport(seen)) == 0
        assert seen == ["age=&count=1&count=3&submit=submitted1"]

    def test_dry_run_sends_nothing(self):
        seen: list = []
        assert main.run(parse("--dry-run"), transport=echo_transport(seen)) == 0
        assert seen == []

    def test_form_error_exit_code(self):
        seen: list = []
        code = main.run(parse("--input", "gender=male"), transport=echo_transport(seen))
        assert code == 2
        assert seen == []

    def test_http_error_exit_code(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        assert main.run(parse(), transport=httpx.MockTransport(handler)) == 1

    def test_writes_report(self, tmp_path):
        out = tmp_path / "report.json"
        seen: list = []
        main.run(parse("--output", str(out)), transport=echo_transport(seen))
        assert out.exists()
        assert '"submit"' in out.read_text()
