"""Expand JSON templates whose leaves are expressions over input data."""

from .exceptions import (
    CompileError,
    ConfigurationError,
    ExpansionError,
    FragmentNotFoundError,
    MissingKeyError,
    TemplateError,
)
from .rendering import Template
from .template import OrderedContainer, compute_functions

__version__ = "1.0.0"

__all__ = [
    "Template",
    "OrderedContainer",
    "compute_functions",
    "CompileError",
    "ConfigurationError",
    "ExpansionError",
    "FragmentNotFoundError",
    "MissingKeyError",
    "TemplateError",
]
