"""
Fragments: named sub-templates invoked from expressions.

Fragments are compiled against their own environment, which exposes ``ref``
and ``args`` but not ``data`` and does not declare ``fragment`` itself, so a
fragment cannot call another fragment.

From a template expression a fragment is called directly::

    fragment('address', data.person.Address)

or once per element of a list, the element becoming ``args[0]``::

    data.people.fragment('person', 'extra argument')
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional

from ..exceptions import CompileError, FragmentNotFoundError
from ..template.compiler import compile_template
from ..template.container import wrap
from ..template.engine import Environment
from ..template.nodes import CompiledNode
from .expander import Expander

logger = logging.getLogger(__name__)

# Largest number of trailing arguments a fragment call accepts
MAX_FRAGMENT_ARGS = 5


@dataclass(frozen=True)
class Fragment:
    """A compiled fragment."""

    name: str
    tree: CompiledNode


class FragmentRegistry:
    """Compiled fragments by name."""

    def __init__(self, fragments: Mapping[str, Fragment]):
        self._fragments: Dict[str, Fragment] = dict(fragments)

    @classmethod
    def compile(cls, templates: Mapping[str, str], environment: Environment) -> "FragmentRegistry":
        """
        Compile fragment templates.

        Args:
            templates: Fragment name -> fragment template JSON text
            environment: The fragment environment (ref and args, no data)

        Returns:
            Registry holding every compiled fragment

        Raises:
            CompileError: If any fragment fails to compile
        """
        fragments = {}
        for name, text in templates.items():
            try:
                tree = compile_template(text, environment)
            except CompileError as e:
                raise CompileError(f"Fragment '{name}': {e}", expression=e.expression) from e
            fragments[name] = Fragment(name, tree)
            logger.debug("Compiled fragment %r", name)
        return cls(fragments)

    def get(self, name: str) -> Fragment:
        try:
            return self._fragments[name]
        except KeyError:
            raise FragmentNotFoundError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._fragments

    def __iter__(self) -> Iterator[str]:
        return iter(self._fragments)

    def __len__(self) -> int:
        return len(self._fragments)


class FragmentFunction:
    """
    The ``fragment`` function registered into template expressions.

    Each call expands the fragment with a fresh context holding ``args`` and
    ``ref``. Object results come back as OrderedContainer values so the
    calling expression can keep working with them.
    """

    name = "fragment"

    def __init__(self, registry: FragmentRegistry, expander: Expander, ref: Mapping[str, Any],
                 names: Optional[Mapping[str, Any]] = None):
        self.registry = registry
        self.expander = expander
        self.ref = ref
        self.names = dict(names or {})

    def __call__(self, name: str, *args: Any) -> Any:
        """Direct call: fragment(name, arg1, ..., argN)."""
        self._check_args(args)
        return wrap(self._expand(name, list(args)))

    def over_list(self, items: Any, name: str, *args: Any) -> List[Any]:
        """List-receiver call: items.fragment(name, arg1, ...)."""
        if not isinstance(items, (list, tuple)):
            raise TypeError(f"fragment() receiver must be a list, not {type(items).__name__}")
        self._check_args(args)

        # A failure for any element fails the whole call
        return [wrap(self._expand(name, [item, *args])) for item in items]

    def _expand(self, name: str, args: List[Any]) -> Any:
        fragment = self.registry.get(name)
        logger.debug("Expanding fragment %r with %d argument(s)", name, len(args))
        return self.expander.expand(fragment.tree, {**self.names, "args": args, "ref": self.ref})

    @staticmethod
    def _check_args(args: tuple) -> None:
        if len(args) > MAX_FRAGMENT_ARGS:
            raise TypeError(
                f"fragment() takes at most {MAX_FRAGMENT_ARGS} arguments after the name ({len(args)} given)"
            )
