"""
Form/Form.py — Mutable submission state and the form-submission algorithm.

A :class:`Form` pairs the read-only :class:`~Models.FieldCatalog` of one
``<form>`` with a Submission State: an ordered map from field name to the
values that field currently contributes. A name being present in the state
is what makes a field "active"; an absent name contributes nothing.

Submitting builds the data set in catalog (document) order, appends the
clicked button last, and hands the pairs to a *submitter* callable::

    submitter(method, action, enctype, pairs)
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional
from urllib.parse import urlencode

from Models import (
    Button,
    Checkbox,
    ElementNotFound,
    FieldCatalog,
    RadioGroup,
    SelectField,
)

logger = logging.getLogger(__name__)

#: ``(method, action, enctype, pairs) -> response``
Submitter = Callable[[str, str, str, list[tuple[str, str]]], Any]


def encode(pairs: list[tuple[str, str]]) -> str:
    """Form-urlencode *pairs*; repeated names become repeated segments."""
    return urlencode(pairs)


class Form:
    """One HTML form: catalog-checked state edits plus submission.

    Usage::

        form = Form(build_catalog(tag, page_url), submitter=browser.submit)
        form.input("age", "55")
        form.set("gender", "male")
        form.select_by_option_value("count", "5", "1")
        form.click("submit2")

    Not safe for concurrent use; each session should own its own instance.
    """

    def __init__(self, catalog: FieldCatalog, submitter: Optional[Submitter] = None) -> None:
        self.catalog = catalog
        self.submitter = submitter
        self._state: dict[str, list[str]] = catalog.initial_state()

    # ------------------------------------------------------------------
    # Form attributes
    # ------------------------------------------------------------------

    @property
    def method(self) -> str:
        return self.catalog.method

    @property
    def action(self) -> str:
        return self.catalog.action

    @property
    def enctype(self) -> str:
        return self.catalog.enctype

    @property
    def name(self) -> Optional[str]:
        return self.catalog.name

    # ------------------------------------------------------------------
    # Field state
    # ------------------------------------------------------------------

    def input(self, name: str, value: str) -> None:
        """Overwrite the value of a field that is already active.

        Radios and checkboxes that are not yet active must be activated
        with :meth:`set` or :meth:`check` first.
        """
        if name not in self._state:
            raise ElementNotFound(f"No input found with name '{name}'.")
        self._check_radio_value(name, value)
        self._state[name] = [value]
        logger.debug("input %s=%r", name, value)

    def set(self, name: str, value: str) -> None:
        """Create or overwrite the entry for any non-button field."""
        if self.catalog.field(name) is None:
            raise ElementNotFound(f"No input found with name '{name}'.")
        self._check_radio_value(name, value)
        self._state[name] = [value]
        logger.debug("set %s=%r", name, value)

    def check(self, name: str) -> None:
        """Check the checkbox *name*, activating it with its own value."""
        checkbox = self._checkbox(name)
        self._state[name] = [checkbox.value]
        logger.debug("check %s", name)

    def uncheck(self, name: str) -> None:
        """Uncheck the checkbox *name*; a no-op when it is already unchecked."""
        self._checkbox(name)
        self._state.pop(name, None)
        logger.debug("uncheck %s", name)

    def is_checked(self, name: str) -> bool:
        """Return *True* if the checkbox *name* is currently checked."""
        self._checkbox(name)
        return name in self._state

    def remove(self, name: str) -> None:
        """Deactivate *name* so it is left out of the data set."""
        if self.catalog.field(name) is None:
            raise ElementNotFound(f"No input found with name '{name}'.")
        self._state.pop(name, None)
        logger.debug("remove %s", name)

    def value(self, name: str) -> str:
        """Return the active value of *name*.

        For a multi-select the first selected value is returned; use
        :meth:`select_values` for all of them.
        """
        values = self._state.get(name)
        if not values:
            raise ElementNotFound(f"No input found with name '{name}'.")
        return values[0]

    def fields(self) -> dict[str, list[str]]:
        """Return a copy of the active state in document order."""
        return {
            f.name: list(self._state[f.name])
            for f in self.catalog.fields
            if f.name in self._state
        }

    # ------------------------------------------------------------------
    # Selects
    # ------------------------------------------------------------------

    def select_by_option_value(self, name: str, *values: str) -> None:
        """Select exactly the options with *values*, in the given order."""
        field = self._select(name)
        self._check_multiplicity(field, values)
        for value in values:
            if field.select.option_by_value(value) is None:
                raise ElementNotFound(
                    f"The select element with name '{name}' does not have an option with value '{value}'."
                )
        self._replace_selection(name, list(values))
        logger.debug("select %s values=%r", name, values)

    def select_by_option_label(self, name: str, *labels: str) -> None:
        """Select exactly the options labelled *labels*, in the given order."""
        field = self._select(name)
        self._check_multiplicity(field, labels)
        values: list[str] = []
        for label in labels:
            option = field.select.option_by_label(label)
            if option is None:
                raise ElementNotFound(
                    f"The select element with name '{name}' does not have an option with label '{label}'."
                )
            values.append(option.value)
        self._replace_selection(name, values)
        logger.debug("select %s labels=%r", name, labels)

    def select_values(self, name: str) -> list[str]:
        """Return the selected values of *name* in selection order."""
        self._select(name)
        return list(self._state.get(name, []))

    def select_labels(self, name: str) -> list[str]:
        """Return the labels of the selected options in selection order."""
        field = self._select(name)
        labels: list[str] = []
        for value in self._state.get(name, []):
            option = field.select.option_by_value(value)
            labels.append(option.label if option else value)
        return labels

    def remove_value(self, name: str, value: str) -> None:
        """Deselect *value* from the select *name*, keeping the rest in order."""
        self._select(name)
        values = self._state.get(name, [])
        if value not in values:
            raise ElementNotFound(
                f"The select element with name '{name}' does not have '{value}' selected."
            )
        self._replace_selection(name, [v for v in values if v != value])
        logger.debug("deselect %s value=%r", name, value)

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def click(self, name: str) -> Any:
        """Submit the form as if the first button named *name* was pressed."""
        buttons = self.catalog.buttons_named(name)
        if not buttons:
            raise ElementNotFound(f"No button found with name '{name}'.")
        return self._send(buttons[0])

    def click_by_value(self, name: str, value: str) -> Any:
        """Submit the form via the button matching both *name* and *value*."""
        for button in self.catalog.buttons_named(name):
            if button.value == value:
                return self._send(button)
        raise ElementNotFound(
            f"No button found with name '{name}' and value '{value}'."
        )

    def submit(self) -> Any:
        """Submit via the default button.

        The default button is the first submit button in document order;
        a form without buttons is submitted without a button pair.
        """
        button = self.catalog.buttons[0] if self.catalog.buttons else None
        return self._send(button)

    def data_set(self, button: Optional[Button] = None) -> list[tuple[str, str]]:
        """Return the ordered ``(name, value)`` pairs a submission would send."""
        pairs: list[tuple[str, str]] = []
        for f in self.catalog.fields:
            for value in self._state.get(f.name, []):
                pairs.append((f.name, value))
        if button is not None:
            pairs.append((button.name, button.value))
        return pairs

    def encode(self, button: Optional[Button] = None) -> str:
        """Return :meth:`data_set` as an ``application/x-www-form-urlencoded`` string."""
        return encode(self.data_set(button))

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _send(self, button: Optional[Button]) -> Any:
        pairs = self.data_set(button)
        if self.submitter is None:
            raise RuntimeError("Form has no submitter attached")
        logger.debug(
            "Submitting %s %s (%d pair(s), button=%s)",
            self.method,
            self.action or "<page>",
            len(pairs),
            button.name if button else None,
        )
        return self.submitter(self.method, self.action, self.enctype, pairs)

    def _replace_selection(self, name: str, values: list[str]) -> None:
        # an empty selection means the select is left out of the data set
        if values:
            self._state[name] = values
        else:
            self._state.pop(name, None)

    def _check_radio_value(self, name: str, value: str) -> None:
        field = self.catalog.field(name)
        if isinstance(field, RadioGroup) and value not in field.values:
            raise ElementNotFound(
                f"The radio group '{name}' does not have a value '{value}'."
            )

    def _checkbox(self, name: str) -> Checkbox:
        checkbox = self.catalog.checkbox(name)
        if checkbox is None:
            raise ElementNotFound(f"No checkbox found with name '{name}'.")
        return checkbox

    def _select(self, name: str) -> SelectField:
        field = self.catalog.select(name)
        if field is None:
            raise ElementNotFound(f"No select element found with name '{name}'.")
        return field

    @staticmethod
    def _check_multiplicity(field: SelectField, values: tuple[str, ...]) -> None:
        if len(values) > 1 and not field.select.multiple:
            raise ElementNotFound(
                f"The select element with name '{field.name}' is not a select multiple."
            )
