"""
Template expansion.

Walks a compiled template against an evaluation context and builds the
output document. Expression leaves are evaluated through an Activation;
removed and failed leaves are left out of the output.
"""

import logging
from typing import Any, Dict, List, Mapping, Tuple

from ..exceptions import ExpansionError, MissingKeyError
from ..template.engine import Activation, Environment, Outcome
from ..template.nodes import CompiledNode, Expression, ListNode, Literal, ObjectNode

logger = logging.getLogger(__name__)


class Expander:
    """
    Expands compiled templates.

    Failure policy per leaf:
    - remove_property() drops the entry or element
    - a missing key drops it, or aborts the expansion when
      ``missing_key_errors`` is set
    - any other failure drops it, or aborts when ``evaluation_errors`` is set
    """

    def __init__(self, environment: Environment, missing_key_errors: bool = False,
                 evaluation_errors: bool = False):
        self.environment = environment
        self.missing_key_errors = missing_key_errors
        self.evaluation_errors = evaluation_errors

    def expand(self, node: CompiledNode, context: Mapping[str, Any]) -> Any:
        """
        Expand a compiled template against a context.

        Args:
            node: Root node (normally an ObjectNode or ListNode)
            context: Names visible to expressions (data, ref, args, ...)

        Returns:
            Expanded document

        Raises:
            MissingKeyError: If missing_key_errors is set and a lookup fails
            ExpansionError: If evaluation_errors is set and an expression fails
        """
        activation = self.environment.activate(context)
        keep, value = self.expand_node(node, activation, "$")
        # Only an expression root can be dropped
        return value if keep else None

    def expand_node(self, node: CompiledNode, activation: Activation, path: str) -> Tuple[bool, Any]:
        """Expand any node; returns (keep, value)."""
        if isinstance(node, ObjectNode):
            return True, self.expand_object(node, activation, path)
        if isinstance(node, ListNode):
            return True, self.expand_list(node, activation, path)
        if isinstance(node, Expression):
            return self.evaluate(node, activation, path)
        if isinstance(node, Literal):
            return True, node.value
        raise TypeError(f"Unknown template node: {node!r}")

    def expand_object(self, node: ObjectNode, activation: Activation, path: str = "$") -> Dict[str, Any]:
        output: Dict[str, Any] = {}
        for key, child in node.entries:
            keep, value = self.expand_node(child, activation, f"{path}.{key}")
            if keep:
                output[key] = value
        return output

    def expand_list(self, node: ListNode, activation: Activation, path: str = "$") -> List[Any]:
        output: List[Any] = []
        for index, child in enumerate(node.items):
            keep, value = self.expand_node(child, activation, f"{path}[{index}]")
            if keep:
                output.append(value)
        return output

    def evaluate(self, node: Expression, activation: Activation, path: str) -> Tuple[bool, Any]:
        """Evaluate one expression leaf and apply the failure policy."""
        result = activation.evaluate(node.program)

        if result.outcome is Outcome.VALUE:
            return True, result.value

        if result.outcome is Outcome.REMOVE:
            return False, None

        if result.outcome is Outcome.MISSING_KEY and self.missing_key_errors:
            error = result.error
            if isinstance(error, MissingKeyError):
                # Keep the innermost path when the error came from a fragment
                if error.path is None:
                    raise MissingKeyError(error.key, path) from error
                raise error
            key = getattr(error, "attr", None) or (error.args[0] if error.args else "")
            raise MissingKeyError(str(key), path) from error

        if result.outcome is Outcome.FAILURE and self.evaluation_errors:
            if isinstance(result.error, ExpansionError):
                raise result.error
            raise ExpansionError(str(result.error), path) from result.error

        logger.debug("Dropping %s (%s): %s", path, node.source, result.error)
        return False, None
