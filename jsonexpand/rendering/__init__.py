"""Template expansion and fragments."""

from .document import Template
from .expander import Expander
from .fragments import MAX_FRAGMENT_ARGS, Fragment, FragmentFunction, FragmentRegistry

__all__ = [
    "Template",
    "Expander",
    "MAX_FRAGMENT_ARGS",
    "Fragment",
    "FragmentFunction",
    "FragmentRegistry",
]
