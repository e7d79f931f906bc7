from Models.Errors import ElementNotFound, FormError, ParseError
from Models.Form import (
    Button,
    Checkbox,
    Field,
    FieldCatalog,
    Option,
    RadioGroup,
    Select,
    SelectField,
    TextField,
)
from Models.Page import Page
from Models.Submission import Submission

__all__ = [
    "Button",
    "Checkbox",
    "ElementNotFound",
    "Field",
    "FieldCatalog",
    "FormError",
    "Option",
    "Page",
    "ParseError",
    "RadioGroup",
    "Select",
    "SelectField",
    "Submission",
    "TextField",
]
