"""
Ordered container values for use inside expressions.

The expander produces ordered mappings for template objects. When such a
mapping has to travel back into an expression (for example the result of a
fragment call) it is wrapped in an OrderedContainer, which behaves like a
native expression value: it can be indexed, iterated, sized and tested for
containment, but it cannot be converted to another type.
"""

import base64
from collections.abc import Mapping
from typing import Any, Iterator

from ..exceptions import MissingKeyError


class OrderedContainer:
    """Read-only, insertion-ordered view over an expanded object."""

    type_name = "OrderedContainer"

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping):
        self._entries = entries

    def __getitem__(self, key: Any) -> Any:
        try:
            value = self._entries[key]
        except (KeyError, TypeError):
            raise MissingKeyError(str(key))
        return wrap(value)

    def __contains__(self, key: Any) -> bool:
        try:
            return key in self._entries
        except TypeError:
            return False

    def __iter__(self) -> Iterator[Any]:
        # A fresh iterator each time, so the container can be walked repeatedly
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, OrderedContainer):
            return self._entries is other._entries
        return NotImplemented

    def __hash__(self) -> int:
        return id(self._entries)

    def __str__(self) -> str:
        return self.type_name

    def __repr__(self) -> str:
        return f"<{self.type_name} keys={list(self._entries)!r}>"

    def convert_to(self, target: type) -> Any:
        """
        Convert the container to another type.

        Only the container's own type and its type name are supported.

        Raises:
            TypeError: For any other target type
        """
        if target is OrderedContainer:
            return OrderedContainer
        if target is str:
            return self.type_name
        raise TypeError(
            f"type conversion error from '{self.type_name}' to '{getattr(target, '__name__', target)}'"
        )

    def unwrap(self) -> Mapping:
        """Return the wrapped mapping."""
        return self._entries


def wrap(value: Any) -> Any:
    """Wrap mappings as OrderedContainer values; other values pass through."""
    if isinstance(value, OrderedContainer):
        return value
    if isinstance(value, Mapping):
        return OrderedContainer(value)
    return value


def to_native(value: Any) -> Any:
    """
    Recursively unwrap containers into plain dicts and lists.

    Integral floats become ints (so 44.0 serializes as 44) and byte strings
    become base64 text, matching how the documents are written out as JSON.

    Args:
        value: Expanded value, possibly holding OrderedContainer values

    Returns:
        Plain JSON-compatible Python value
    """
    if isinstance(value, OrderedContainer):
        value = value.unwrap()

    if isinstance(value, Mapping):
        return {key: to_native(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_native(item) for item in value]
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return int(value)
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return value
