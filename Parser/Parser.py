"""
Parser/Parser.py — Builds a :class:`~Models.FieldCatalog` from a parsed form.

Walks the ``<input>``, ``<textarea>``, ``<select>`` and ``<button>``
descendants of one ``<form>`` in document order and emits one immutable
descriptor per field name:

  - text-like inputs and textareas  -> :class:`~Models.TextField`
  - radios sharing a name           -> :class:`~Models.RadioGroup`
  - checkboxes                      -> :class:`~Models.Checkbox`
  - selects                         -> :class:`~Models.SelectField`
  - submit buttons                  -> :class:`~Models.Button`

Controls that are nameless, disabled, or of an unsupported type are skipped.
"""
from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from Models import (
    Button,
    Checkbox,
    FieldCatalog,
    Option,
    ParseError,
    RadioGroup,
    Select,
    SelectField,
    TextField,
)

logger = logging.getLogger(__name__)

DEFAULT_ENCTYPE = "application/x-www-form-urlencoded"

_ENCTYPES: frozenset[str] = frozenset(
    {DEFAULT_ENCTYPE, "multipart/form-data", "text/plain"}
)

# Input types that never reach the data set through this model
_SKIP_TYPES: frozenset[str] = frozenset({"file", "image", "reset", "button"})


def find_forms(html: str) -> list[Tag]:
    """Return every ``<form>`` element of *html* in document order."""
    soup = BeautifulSoup(html or "", "html.parser")
    return soup.find_all("form")


def build_catalog(form: Optional[Tag], base_url: str = "") -> FieldCatalog:
    """Classify every control of *form* and return its :class:`FieldCatalog`.

    *base_url* is the URL of the page holding the form; the ``action``
    attribute is resolved against it and an empty action means the page
    itself.

    Raises :class:`~Models.ParseError` when *form* is not a ``<form>`` tag.
    """
    if not isinstance(form, Tag) or form.name != "form":
        raise ParseError(f"Expected a <form> element, got {_describe(form)}.")

    builder = _CatalogBuilder()
    for el in form.find_all(["input", "textarea", "select", "button"]):
        builder.add(el)

    method = "POST" if (form.get("method") or "").strip().upper() == "POST" else "GET"
    enctype = (form.get("enctype") or "").strip().lower()
    if enctype not in _ENCTYPES:
        enctype = DEFAULT_ENCTYPE

    catalog = builder.build(
        method=method,
        action=urljoin(base_url, (form.get("action") or "").strip()),
        enctype=enctype,
        name=form.get("name"),
    )
    logger.debug(
        "Form %r: %d field(s), %d button(s), %s %s",
        catalog.name,
        len(catalog.fields),
        len(catalog.buttons),
        catalog.method,
        catalog.action or "<page>",
    )
    return catalog


def _describe(el: object) -> str:
    if isinstance(el, Tag):
        return f"<{el.name}>"
    return type(el).__name__


class _CatalogBuilder:
    """One-pass accumulator; only :meth:`build` produces frozen records."""

    def __init__(self) -> None:
        # name -> partition kind, in first-registration order
        self._order: dict[str, str] = {}
        self._texts: dict[str, TextField] = {}
        self._radios: dict[str, tuple[list[str], Optional[str]]] = {}
        self._checkboxes: dict[str, Checkbox] = {}
        self._selects: dict[str, SelectField] = {}
        self._buttons: list[Button] = []

    def add(self, el: Tag) -> None:
        name = el.get("name")
        if not name:
            return
        if el.has_attr("disabled"):
            logger.debug("Skipping disabled control %r", name)
            return

        if el.name == "textarea":
            self._add_text(name, _textarea_value(el))
        elif el.name == "select":
            self._add_select(name, el)
        elif el.name == "button":
            if (el.get("type") or "submit").strip().lower() == "submit":
                self._buttons.append(Button(name=name, value=el.get("value", "")))
        else:
            self._add_input(name, el)

    def _add_input(self, name: str, el: Tag) -> None:
        itype = (el.get("type") or "text").strip().lower()
        if itype in _SKIP_TYPES:
            logger.debug("Skipping unsupported input type %r (%s)", itype, name)
        elif itype == "submit":
            self._buttons.append(Button(name=name, value=el.get("value", "")))
        elif itype == "radio":
            self._add_radio(name, el.get("value", "on"), el.has_attr("checked"))
        elif itype == "checkbox":
            self._add_checkbox(name, el.get("value", "on"), el.has_attr("checked"))
        else:
            self._add_text(name, el.get("value", ""))

    def _register(self, name: str, kind: str) -> bool:
        """Reserve *name* for *kind*; return *False* if it is already taken."""
        existing = self._order.get(name)
        if existing is None:
            self._order[name] = kind
            return True
        if existing != kind:
            logger.debug("Name %r already used by a %s field — skipping %s", name, existing, kind)
        return False

    def _add_text(self, name: str, value: str) -> None:
        if self._register(name, "text"):
            self._texts[name] = TextField(name=name, default=value)

    def _add_radio(self, name: str, value: str, checked: bool) -> None:
        if self._register(name, "radio"):
            self._radios[name] = ([], None)
        elif name not in self._radios:
            return
        values, default = self._radios[name]
        values.append(value)
        if checked:
            # last checked radio wins, as in a browser
            default = value
        self._radios[name] = (values, default)

    def _add_checkbox(self, name: str, value: str, checked: bool) -> None:
        if self._register(name, "checkbox"):
            self._checkboxes[name] = Checkbox(name=name, value=value, checked=checked)
        elif name in self._checkboxes and checked and not self._checkboxes[name].checked:
            # same-named checkboxes share one on/off entry
            self._checkboxes[name] = Checkbox(name=name, value=value, checked=True)

    def _add_select(self, name: str, el: Tag) -> None:
        if not self._register(name, "select"):
            return
        multiple = el.has_attr("multiple")
        options = [_option(o) for o in el.find_all("option")]
        if not multiple:
            marked = [i for i, o in enumerate(options) if o.selected]
            for i in marked[:-1]:
                o = options[i]
                options[i] = Option(value=o.value, label=o.label, selected=False)
        select = Select(name=name, multiple=multiple, options=tuple(options))
        self._selects[name] = SelectField(name=name, select=select)

    def build(self, **form_attrs) -> FieldCatalog:
        fields = []
        for name, kind in self._order.items():
            if kind == "text":
                fields.append(self._texts[name])
            elif kind == "radio":
                values, default = self._radios[name]
                fields.append(RadioGroup(name=name, values=tuple(values), default=default))
            elif kind == "checkbox":
                fields.append(self._checkboxes[name])
            else:
                fields.append(self._selects[name])
        return FieldCatalog(
            fields=tuple(fields),
            buttons=tuple(self._buttons),
            **form_attrs,
        )


def _option(el: Tag) -> Option:
    # html.parser nests options whose closing tag is omitted
    label = "".join(s for s in el.strings if s.find_parent("option") is el).strip()
    value = el.get("value")
    return Option(
        value=label if value is None else value,
        label=label,
        selected=el.has_attr("selected"),
    )


def _textarea_value(el: Tag) -> str:
    text = el.get_text()
    # a single leading newline is dropped by HTML parsers
    if text.startswith("\r\n"):
        return text[2:]
    if text.startswith("\n"):
        return text[1:]
    return text
