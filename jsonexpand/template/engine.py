"""
Expression compilation and evaluation.

Template leaves are Python expressions evaluated in a sandbox provided by
simpleeval. This module is the only place that talks to simpleeval: it
declares variables and functions, compiles expression text into reusable
programs, and evaluates programs against a context, classifying every
outcome into a tagged Evaluation instead of letting exceptions escape.
"""

import ast
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Dict, FrozenSet, Iterable, Optional

from simpleeval import (
    DISALLOW_METHODS,
    DISALLOW_PREFIXES,
    AttributeDoesNotExist,
    EvalWithCompoundTypes,
    FeatureNotAvailable,
)

from ..exceptions import ExpressionCompileError, MissingKeyError, RemoveSignal
from .container import OrderedContainer

logger = logging.getLogger(__name__)


class Outcome(Enum):
    """How an expression evaluation ended."""

    VALUE = auto()        # normal result
    REMOVE = auto()       # remove_property() was called
    MISSING_KEY = auto()  # a key lookup found nothing
    FAILURE = auto()      # any other evaluation error


@dataclass(frozen=True)
class Evaluation:
    """Tagged result of evaluating a program."""

    outcome: Outcome
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.VALUE


@dataclass(frozen=True)
class Program:
    """A compiled expression: its source text and parsed tree."""

    source: str
    tree: ast.expr


class _TemplateEval(EvalWithCompoundTypes):
    """
    simpleeval evaluator with two template-specific behaviours.

    - ``x.name`` on a mapping (or an OrderedContainer) is a key lookup, and an
      absent key raises MissingKeyError.
    - ``receiver.func(args)`` dispatches to a declared member function as
      ``func(receiver, *args)``.
    """

    def __init__(self, names: Dict[str, Any], functions: Dict[str, Callable],
                 member_functions: Dict[str, Callable]):
        super().__init__(functions=functions, names=names)
        self.member_functions = member_functions

    def _eval_attribute(self, node):
        target = self._eval(node.value)
        if isinstance(target, (Mapping, OrderedContainer)):
            try:
                return target[node.attr]
            except KeyError:
                raise MissingKeyError(node.attr)

        # Same restrictions simpleeval applies, resolved on the target above
        for prefix in DISALLOW_PREFIXES:
            if node.attr.startswith(prefix):
                raise FeatureNotAvailable(f"Sorry, access to this attribute is not available. ({node.attr})")
        if node.attr in DISALLOW_METHODS:
            raise FeatureNotAvailable(f"Sorry, this method is not available. ({node.attr})")

        try:
            return getattr(target, node.attr)
        except AttributeError:
            raise AttributeDoesNotExist(node.attr, self.expr) from None

    def _eval_call(self, node):
        if isinstance(node.func, ast.Attribute) and node.func.attr in self.member_functions:
            receiver = self._eval(node.func.value)
            func = self.member_functions[node.func.attr]
            return func(receiver, *(self._eval(arg) for arg in node.args))
        return super()._eval_call(node)


class Activation:
    """An environment bound to one evaluation context."""

    def __init__(self, environment: "Environment", context: Mapping):
        self.environment = environment
        self._evaluator = _TemplateEval(
            names=dict(context),
            functions=dict(environment.functions),
            member_functions=dict(environment.member_functions),
        )

    def evaluate(self, program: Program) -> Evaluation:
        """
        Evaluate a compiled program.

        Args:
            program: Program returned by Environment.compile

        Returns:
            Evaluation tagged with the outcome; errors are carried, not raised
        """
        try:
            value = self._evaluator.eval(program.source, previously_parsed=program.tree)
        except RemoveSignal:
            return Evaluation(Outcome.REMOVE)
        except KeyError as e:
            return Evaluation(Outcome.MISSING_KEY, error=e)
        except Exception as e:
            return Evaluation(Outcome.FAILURE, error=e)
        return Evaluation(Outcome.VALUE, value=value)


class Environment:
    """
    Declared variables and functions that expressions may use.

    Variables are bound at evaluation time; only function references are
    checked when compiling, so calling an undeclared function is a compile
    error while reading an unbound variable is an evaluation failure.

    A member call ``x.name(...)`` whose name is in ``reserved_members``
    compiles only where that name is declared as a member function.
    """

    def __init__(
        self,
        variables: Iterable[str] = (),
        functions: Optional[Dict[str, Callable]] = None,
        member_functions: Optional[Dict[str, Callable]] = None,
        reserved_members: Iterable[str] = (),
    ):
        self.variables: FrozenSet[str] = frozenset(variables)
        self.functions: Dict[str, Callable] = dict(functions or {})
        self.member_functions: Dict[str, Callable] = dict(member_functions or {})
        self.reserved_members: FrozenSet[str] = frozenset(reserved_members)

    def declare_variable(self, name: str) -> None:
        self.variables = self.variables | {name}

    def declare_function(self, name: str, func: Callable) -> None:
        self.functions[name] = func

    def declare_member_function(self, name: str, func: Callable) -> None:
        self.member_functions[name] = func

    def extend(
        self,
        variables: Iterable[str] = (),
        functions: Optional[Dict[str, Callable]] = None,
        member_functions: Optional[Dict[str, Callable]] = None,
    ) -> "Environment":
        """Return a new environment with extra declarations."""
        return Environment(
            variables=self.variables | frozenset(variables),
            functions={**self.functions, **(functions or {})},
            member_functions={**self.member_functions, **(member_functions or {})},
            reserved_members=self.reserved_members,
        )

    def compile(self, text: str) -> Program:
        """
        Compile expression text into a program.

        Args:
            text: Expression source (e.g., "data.name" or "'literal'")

        Returns:
            Program ready for evaluation

        Raises:
            ExpressionCompileError: On a syntax error or an undeclared function
        """
        logger.debug("Compiling expression %r", text)
        try:
            tree = ast.parse(text.strip(), mode="eval").body
        except SyntaxError as e:
            raise ExpressionCompileError(text, f"syntax error: {e.msg}") from e

        for node in ast.walk(tree):
            if not isinstance(node, ast.Call):
                continue
            if isinstance(node.func, ast.Name):
                name = node.func.id
                if name not in self.functions and name not in self.variables:
                    raise ExpressionCompileError(text, f"undeclared function '{name}'")
            elif isinstance(node.func, ast.Attribute):
                name = node.func.attr
                if name in self.reserved_members and name not in self.member_functions:
                    raise ExpressionCompileError(text, f"undeclared member function '{name}'")

        return Program(source=text, tree=tree)

    def activate(self, context: Mapping) -> Activation:
        return Activation(self, context)
