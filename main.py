"""
main.py — Entry point for Form Surfer.

Sets up the CLI, configures logging, opens the target page, applies the
requested field edits to one of its forms in command-line order, then
submits it (or only prints the data set with ``--dry-run``).

Usage::

    python main.py --url https://target.com/signup --form "[name='default']" \
                   --input age=55 --set gender=male --click submit2

See ``python main.py --help`` for full documentation.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

import httpx

from Browser import Browser
from Form import Form
from Models import FormError
from Reporter import Reporter, console

logger = logging.getLogger(__name__)

# Steps that accept NAME=VALUE rather than a bare NAME
_PAIR_STEPS: frozenset[str] = frozenset(
    {"input", "set", "select", "select-label", "deselect"}
)


# ---------------------------------------------------------------------------
# CLI definition
# ---------------------------------------------------------------------------


class _StepAction(argparse.Action):
    """Append ``(step, name, value)`` to ``namespace.steps`` preserving CLI order."""

    def __call__(self, parser, namespace, values, option_string=None):
        step = self.dest
        if step in _PAIR_STEPS:
            name, sep, value = values.partition("=")
            if not sep or not name:
                parser.error(f"{option_string} expects NAME=VALUE, got {values!r}")
        else:
            name, value = values, ""
        steps = list(getattr(namespace, "steps", None) or [])
        steps.append((step, name, value))
        namespace.steps = steps


def build_arg_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="form-surfer",
        description="Fill in and submit an HTML form the way a browser would",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=r"""
Examples
────────
  Show a form's fields and the data set it would send:
    python main.py --url https://target.com/signup --dry-run

  Fill in and submit with a specific button:
    python main.py --url https://target.com/signup \
                   --input age=55 --set gender=male --check newsletter \
                   --click submit2

  Multi-select, in selection order:
    python main.py --url https://target.com/search \
                   --select count=5 --select count=1 --submit
        """,
    )
    parser.set_defaults(steps=[])

    # ── Target ────────────────────────────────────────────────────────────────
    parser.add_argument(
        "--url",
        required=True,
        metavar="URL",
        help="Page holding the form (required)",
    )
    parser.add_argument(
        "--form",
        default="form",
        metavar="SELECTOR",
        help="CSS selector of the form to use (default: first form)",
    )

    # ── Fields ────────────────────────────────────────────────────────────────
    fields = parser.add_argument_group(
        "fields", "Applied in the order given on the command line"
    )
    fields.add_argument("--input", dest="input", action=_StepAction, metavar="NAME=VALUE",
                        help="Overwrite a field that already has a value")
    fields.add_argument("--set", dest="set", action=_StepAction, metavar="NAME=VALUE",
                        help="Set a field, activating radios/checkboxes")
    fields.add_argument("--check", dest="check", action=_StepAction, metavar="NAME",
                        help="Check a checkbox")
    fields.add_argument("--uncheck", dest="uncheck", action=_StepAction, metavar="NAME",
                        help="Uncheck a checkbox")
    fields.add_argument("--remove", dest="remove", action=_StepAction, metavar="NAME",
                        help="Leave a field out of the submission")
    fields.add_argument("--select", dest="select", action=_StepAction, metavar="NAME=VALUE",
                        help="Select an option by value; repeat for a multi-select")
    fields.add_argument("--select-label", dest="select-label", action=_StepAction,
                        metavar="NAME=LABEL",
                        help="Select an option by label; repeat for a multi-select")
    fields.add_argument("--deselect", dest="deselect", action=_StepAction, metavar="NAME=VALUE",
                        help="Remove one selected value from a select")

    # ── Submission ────────────────────────────────────────────────────────────
    submit = parser.add_argument_group("submission")
    how = submit.add_mutually_exclusive_group()
    how.add_argument(
        "--click",
        metavar="NAME[=VALUE]",
        help="Submit by clicking the named button (VALUE picks among same-named buttons)",
    )
    how.add_argument(
        "--submit",
        action="store_true",
        default=False,
        help="Submit with the form's default button (default action)",
    )
    how.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Only print the data set that would be sent",
    )

    # ── HTTP ──────────────────────────────────────────────────────────────────
    http = parser.add_argument_group("http")
    http.add_argument("--timeout", type=float, default=15.0, metavar="SECS",
                      help="Request timeout in seconds (default: 15)")
    http.add_argument("--user-agent", metavar="STRING", help="User-Agent header to send")
    http.add_argument("--header", dest="headers", action="append", default=[],
                      metavar="'NAME: VALUE'", help="Extra request header (repeatable)")
    http.add_argument("--proxy", metavar="URL",
                      help="HTTP proxy to route traffic through (e.g. http://127.0.0.1:8080)")
    http.add_argument("--no-verify", dest="verify", action="store_false", default=True,
                      help="Disable TLS certificate verification")

    # ── Output ────────────────────────────────────────────────────────────────
    out = parser.add_argument_group("output")
    out.add_argument("--output", default=None, metavar="FILE",
                     help="Write the submissions as a JSON report")
    out.add_argument("--verbose", action="store_true", help="Enable DEBUG-level logging")

    return parser


# ---------------------------------------------------------------------------
# Form driving
# ---------------------------------------------------------------------------


def apply_steps(form: Form, steps: list[tuple[str, str, str]]) -> None:
    """Apply CLI *steps* to *form* in order.

    All ``select``/``select-label`` steps for the same name are merged into
    one selection, applied where the first of them appears, so a
    multi-select keeps their order.
    """
    selections: dict[tuple[str, str], list[str]] = {}
    for kind, name, value in steps:
        if kind in ("select", "select-label"):
            selections.setdefault((kind, name), []).append(value)

    for kind, name, value in steps:
        if kind not in ("select", "select-label"):
            _apply_one(form, kind, name, value)
            continue
        values = selections.pop((kind, name), None)
        if values is None:
            continue
        if kind == "select":
            form.select_by_option_value(name, *values)
        else:
            form.select_by_option_label(name, *values)


def _apply_one(form: Form, kind: str, name: str, value: str) -> None:
    if kind == "input":
        form.input(name, value)
    elif kind == "set":
        form.set(name, value)
    elif kind == "check":
        form.check(name)
    elif kind == "uncheck":
        form.uncheck(name)
    elif kind == "remove":
        form.remove(name)
    elif kind == "deselect":
        form.remove_value(name, value)
    else:
        raise ValueError(f"Unknown step {kind!r}")


def parse_headers(raw: list[str]) -> dict[str, str]:
    """Turn ``'Name: value'`` strings into a header dict; bad entries are skipped."""
    headers: dict[str, str] = {}
    for item in raw:
        name, sep, value = item.partition(":")
        if not sep or not name.strip():
            logger.warning("Ignoring malformed header %r", item)
            continue
        headers[name.strip()] = value.strip()
    return headers


def _submit(form: Form, click: Optional[str]) -> None:
    if click:
        name, sep, value = click.partition("=")
        if sep:
            form.click_by_value(name, value)
        else:
            form.click(name)
    else:
        form.submit()


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def run(args: argparse.Namespace, transport: Optional[httpx.BaseTransport] = None) -> int:
    """Open the page, drive the form, submit, and report. Returns an exit code."""
    reporter = Reporter(output_file=args.output)
    reporter.print_banner()

    browser = Browser(
        timeout=args.timeout,
        user_agent=args.user_agent,
        proxy=args.proxy,
        verify=args.verify,
        headers=parse_headers(args.headers),
        transport=transport,
    )
    try:
        reporter.log_info(f"Target:      [bold cyan]{args.url}[/bold cyan]")
        browser.open(args.url)
        form = browser.form(args.form)
        apply_steps(form, args.steps)
        reporter.print_form(form)

        if args.dry_run:
            console.print(form.encode())
            return 0

        _submit(form, args.click)
        reporter.log_submission(browser.submissions[-1])
    except FormError as exc:
        reporter.log_error(str(exc))
        return 2
    except httpx.HTTPError as exc:
        reporter.log_error(f"Request failed: {exc}")
        return 1
    finally:
        browser.close()
        reporter.save()
    return 0


def main() -> None:
    """Parse arguments, configure logging, and run."""
    parser = build_arg_parser()
    args = parser.parse_args()

    # ── Logging setup ─────────────────────────────────────────────────────────
    log_level = logging.DEBUG if args.verbose else logging.ERROR
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    # Suppress noisy library logs unless in verbose mode
    if not args.verbose:
        for lib in ("httpx", "httpcore"):
            logging.getLogger(lib).setLevel(logging.WARNING)

    sys.exit(run(args))


if __name__ == "__main__":
    main()
