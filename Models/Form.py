"""
Models/Form.py — Immutable catalog types describing a parsed HTML form.

Every descriptor is built once by :func:`Parser.build_catalog` and never
mutated afterwards; the mutable side of a form lives in
:class:`Form.Form`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Option:
    """A single ``<option>`` of a ``<select>``."""

    value: str
    """Submitted value (the option text when no ``value`` attribute is set)."""

    label: str
    """Visible text with surrounding whitespace stripped."""

    selected: bool = False
    """Whether the option carried a ``selected`` mark in the source."""


@dataclass(frozen=True)
class Select:
    """A ``<select>`` element and its options in document order."""

    name: str
    multiple: bool = False
    options: tuple[Option, ...] = ()

    def defaults(self) -> list[str]:
        """Return the default-selected option values in document order.

        A single select keeps only the last marked option.
        """
        values = [o.value for o in self.options if o.selected]
        if not self.multiple and len(values) > 1:
            return values[-1:]
        return values

    def option_by_value(self, value: str) -> Optional[Option]:
        for option in self.options:
            if option.value == value:
                return option
        return None

    def option_by_label(self, label: str) -> Optional[Option]:
        for option in self.options:
            if option.label == label:
                return option
        return None


@dataclass(frozen=True)
class TextField:
    """Text-like ``<input>`` or ``<textarea>``; always submitted."""

    name: str
    default: str = ""


@dataclass(frozen=True)
class RadioGroup:
    """All radio buttons sharing one name."""

    name: str
    values: tuple[str, ...] = ()
    default: Optional[str] = None
    """Value of the last radio checked in the source, if any."""


@dataclass(frozen=True)
class Checkbox:
    """A named on/off checkbox whose "on" value is its ``value`` attribute."""

    name: str
    value: str = "on"
    checked: bool = False


@dataclass(frozen=True)
class SelectField:
    name: str
    select: Select


@dataclass(frozen=True)
class Button:
    """A submit button; contributes only when it is the clicked control."""

    name: str
    value: str = ""


Field = Union[TextField, RadioGroup, Checkbox, SelectField]


@dataclass(frozen=True)
class FieldCatalog:
    """Read-only registry of a form's named controls.

    *fields* holds one descriptor per name in the order the name was first
    seen in the document; *buttons* holds every submit button in document
    order (names may repeat).
    """

    fields: tuple[Field, ...] = ()
    buttons: tuple[Button, ...] = ()
    method: str = "GET"
    action: str = ""
    enctype: str = "application/x-www-form-urlencoded"
    name: Optional[str] = None

    def field(self, name: str) -> Optional[Field]:
        """Return the descriptor registered under *name*, or *None*."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def checkbox(self, name: str) -> Optional[Checkbox]:
        f = self.field(name)
        return f if isinstance(f, Checkbox) else None

    def select(self, name: str) -> Optional[SelectField]:
        f = self.field(name)
        return f if isinstance(f, SelectField) else None

    def buttons_named(self, name: str) -> list[Button]:
        return [b for b in self.buttons if b.name == name]

    def initial_state(self) -> dict[str, list[str]]:
        """Build the Submission State a freshly loaded page would have."""
        state: dict[str, list[str]] = {}
        for f in self.fields:
            if isinstance(f, TextField):
                state[f.name] = [f.default]
            elif isinstance(f, RadioGroup):
                if f.default is not None:
                    state[f.name] = [f.default]
            elif isinstance(f, Checkbox):
                if f.checked:
                    state[f.name] = [f.value]
            elif isinstance(f, SelectField):
                defaults = f.select.defaults()
                if defaults:
                    state[f.name] = defaults
        return state
