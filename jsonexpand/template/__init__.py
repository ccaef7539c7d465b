"""Template compilation and expression evaluation."""

from .compiler import compile_template
from .container import OrderedContainer, to_native, wrap
from .engine import Activation, Environment, Evaluation, Outcome, Program
from .functions import (
    BASE_FUNCTIONS,
    compute_functions,
    format_date,
    java_to_strftime,
    jsonpath,
    jsonpath_first,
    remove_property,
)
from .nodes import CompiledNode, Expression, ListNode, Literal, ObjectNode

__all__ = [
    "compile_template",
    "OrderedContainer",
    "to_native",
    "wrap",
    "Activation",
    "Environment",
    "Evaluation",
    "Outcome",
    "Program",
    "BASE_FUNCTIONS",
    "compute_functions",
    "format_date",
    "java_to_strftime",
    "jsonpath",
    "jsonpath_first",
    "remove_property",
    "CompiledNode",
    "Expression",
    "ListNode",
    "Literal",
    "ObjectNode",
]
