"""
Template construction and expansion entry points.

A Template is compiled once and can then be expanded any number of times
against different input documents:

    template = Template('{"name": "data.firstName"}')
    template.expand({"firstName": "Bob"})   # '{"name":"Bob"}'
"""

import json
import logging
from typing import Any, Callable, Dict, Mapping, Optional

from ..exceptions import ConfigurationError, ExpansionError
from ..template.compiler import compile_template
from ..template.container import to_native
from ..template.engine import Environment
from ..template.functions import BASE_FUNCTIONS
from ..template.nodes import CompiledNode
from .expander import Expander
from .fragments import FragmentFunction, FragmentRegistry

logger = logging.getLogger(__name__)

RESERVED_NAMES = frozenset({"data", "ref", "args", "fragment", "remove_property"})


class Template:
    """A compiled JSON template."""

    def __init__(
        self,
        template: str,
        ref: Optional[Mapping[str, Any]] = None,
        fragments: Optional[Mapping[str, str]] = None,
        functions: Optional[Dict[str, Callable]] = None,
        member_functions: Optional[Dict[str, Callable]] = None,
        names: Optional[Mapping[str, Any]] = None,
        missing_key_errors: bool = False,
        evaluation_errors: bool = False,
    ):
        """
        Compile a template and its fragments.

        Args:
            template: JSON text of the template
            ref: Reference data visible as ``ref`` to the template and fragments
            fragments: Fragment name -> fragment template JSON text
            functions: Extra functions callable from expressions
            member_functions: Extra receiver-style functions (``x.func(...)``)
            names: Extra constant names visible to expressions
            missing_key_errors: Abort expansion on a missing key instead of
                dropping the entry
            evaluation_errors: Abort expansion on any other expression failure

        Raises:
            CompileError: If the template or any fragment fails to compile
            ConfigurationError: If an option redeclares a reserved name
        """
        self.ref: Mapping[str, Any] = ref if ref is not None else {}
        self.names: Dict[str, Any] = dict(names or {})
        self.missing_key_errors = missing_key_errors
        self.evaluation_errors = evaluation_errors

        functions = dict(functions or {})
        member_functions = dict(member_functions or {})
        clashes = RESERVED_NAMES & (set(functions) | set(member_functions) | set(self.names))
        if clashes:
            raise ConfigurationError(f"Reserved names cannot be redeclared: {', '.join(sorted(clashes))}")

        # Fragments see ref and args, never data, and cannot call fragment()
        fragment_env = Environment(
            variables={"ref", "args", *self.names},
            functions={**BASE_FUNCTIONS, **functions},
            member_functions=member_functions,
            reserved_members={FragmentFunction.name},
        )
        self.fragments = FragmentRegistry.compile(fragments or {}, fragment_env)
        fragment_expander = Expander(fragment_env, missing_key_errors, evaluation_errors)
        fragment_function = FragmentFunction(self.fragments, fragment_expander, self.ref, self.names)

        self.environment = fragment_env.extend()
        self.environment.declare_variable("data")
        self.environment.declare_function(FragmentFunction.name, fragment_function)
        self.environment.declare_member_function(FragmentFunction.name, fragment_function.over_list)
        self.tree: CompiledNode = compile_template(template, self.environment)
        self.expander = Expander(self.environment, missing_key_errors, evaluation_errors)

        logger.info("Compiled template with %d fragment(s)", len(self.fragments))

    def expand_document(self, data: Mapping[str, Any]) -> Any:
        """
        Expand the template into plain Python values.

        Args:
            data: Input document, visible to expressions as ``data``

        Returns:
            Expanded document (dicts keep template key order)

        Raises:
            MissingKeyError: If missing_key_errors is set and a lookup fails
            ExpansionError: If evaluation_errors is set and an expression fails
        """
        context = {**self.names, "data": data, "ref": self.ref}
        return to_native(self.expander.expand(self.tree, context))

    def expand(self, data: Mapping[str, Any]) -> str:
        """Expand the template and serialize the result as compact JSON."""
        document = self.expand_document(data)
        try:
            return json.dumps(document, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise ExpansionError(f"Cannot serialize output: {e}") from e

    def expand_json(self, data: str) -> str:
        """Parse JSON input text, then expand the template against it."""
        try:
            document = json.loads(data)
        except json.JSONDecodeError as e:
            raise ExpansionError(f"Invalid input JSON: {e}") from e
        return self.expand(document)
