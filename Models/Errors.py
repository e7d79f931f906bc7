"""
Models/Errors.py — Exception types raised by the form model.
"""
from __future__ import annotations


class FormError(Exception):
    """Base class for every error raised while reading or driving a form."""


class ElementNotFound(FormError):
    """A field, option, or button lookup against the catalog failed.

    The message names what was searched for, e.g.
    ``No checkbox found with name 'option3'.``
    """


class ParseError(FormError):
    """The element handed to the catalog builder is not a usable ``<form>``."""
