"""
Template compilation.

Turns the JSON text of a template into a tree of compiled nodes. Every
string in the template is an expression; there is no literal string leaf.

Templates are parsed as strict JSON. A trailing comma after the last entry
of an object or array is a CompileError, so remove them from templates
written for more lenient parsers.
"""

import json
import logging
from typing import Any

from ..exceptions import CompileError, ExpressionCompileError
from .engine import Environment
from .nodes import CompiledNode, Expression, ListNode, Literal, ObjectNode

logger = logging.getLogger(__name__)


def compile_template(template: str, environment: Environment) -> CompiledNode:
    """
    Compile a JSON template.

    Args:
        template: JSON text whose root is an object or an array
        environment: Environment the expressions are compiled against

    Returns:
        Root ObjectNode or ListNode

    Raises:
        CompileError: If the JSON is invalid or any expression fails to compile
    """
    try:
        document = json.loads(template)
    except json.JSONDecodeError as e:
        raise CompileError(f"Invalid template JSON: {e}") from e

    if not isinstance(document, (dict, list)):
        raise CompileError("Template root must be a JSON object or array")

    return compile_value(document, environment, "$")


def compile_value(value: Any, environment: Environment, path: str) -> CompiledNode:
    """
    Compile one parsed JSON value.

    Args:
        value: Parsed JSON value
        environment: Environment the expressions are compiled against
        path: JSON path of the value, used in error messages

    Returns:
        Compiled node for the value
    """
    if isinstance(value, dict):
        return ObjectNode(tuple(
            (key, compile_value(item, environment, f"{path}.{key}"))
            for key, item in value.items()
        ))

    if isinstance(value, list):
        return ListNode(tuple(
            compile_value(item, environment, f"{path}[{index}]")
            for index, item in enumerate(value)
        ))

    if isinstance(value, str):
        try:
            return Expression(environment.compile(value))
        except ExpressionCompileError as e:
            raise CompileError(str(e), path=path, expression=value) from e

    # bool must be checked before int
    if isinstance(value, bool):
        return Literal(value)

    if isinstance(value, (int, float)):
        return Literal(float(value))

    # null and anything else passes through untouched
    return Literal(value)
