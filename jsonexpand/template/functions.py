"""
Functions available to template expressions.

Every template gets the base functions below. The optional library returned
by compute_functions() adds date formatting and JSONPath queries:

    Template(text, functions=compute_functions())
"""

import re
from functools import lru_cache
from typing import Any, Callable, Dict, List

from dateutil import parser as date_parser
from jsonpath_ng import parse as jsonpath_parse

from ..exceptions import RemoveSignal
from .container import to_native


def remove_property() -> Any:
    """Drop the enclosing entry or list element from the output."""
    raise RemoveSignal()


BASE_FUNCTIONS: Dict[str, Callable] = {
    "int": int,
    "float": float,
    "str": str,
    "bool": bool,
    "len": len,
    "abs": abs,
    "min": min,
    "max": max,
    "round": round,
    "sorted": sorted,
    "remove_property": remove_property,
}

# Java SimpleDateFormat fields and their strftime codes
_DATE_FIELDS = {
    "yyyy": "%Y", "yy": "%y",
    "MMMM": "%B", "MMM": "%b", "MM": "%m",
    "dd": "%d",
    "EEEE": "%A", "EEE": "%a",
    "HH": "%H", "hh": "%I", "mm": "%M", "ss": "%S", "a": "%p",
    "Z": "%z", "z": "%Z",
}

_DATE_TOKEN = re.compile(
    r"'(?P<quoted>(?:[^']|'')*)'|"
    + "|".join(sorted(_DATE_FIELDS, key=len, reverse=True))
)


def _escape(text: str) -> str:
    return text.replace("%", "%%")


def java_to_strftime(pattern: str) -> str:
    """
    Translate a Java date pattern into a strftime format.

    Text in single quotes is copied literally and ``''`` is a quote, so
    ``yyyy-MM-dd'T'HH:mm`` becomes ``%Y-%m-%dT%H:%M``. Letters with no
    mapping are kept as they are.

    Args:
        pattern: Java SimpleDateFormat pattern

    Returns:
        Equivalent strftime format
    """
    parts = []
    position = 0
    for match in _DATE_TOKEN.finditer(pattern):
        parts.append(_escape(pattern[position:match.start()]))
        quoted = match.group("quoted")
        if quoted is None:
            parts.append(_DATE_FIELDS[match.group(0)])
        else:
            parts.append(_escape(quoted.replace("''", "'")) if quoted else "'")
        position = match.end()
    parts.append(_escape(pattern[position:]))
    return "".join(parts)


def format_date(value: Any, pattern: str) -> Any:
    """
    Reformat a date string with a Java date pattern.

    Args:
        value: Date text in any format python-dateutil understands
        pattern: Java SimpleDateFormat pattern (e.g., 'MMM dd, yyyy')

    Returns:
        The formatted date, or ``value`` unchanged if it is not a date
    """
    try:
        parsed = date_parser.parse(str(value))
    except (ValueError, OverflowError):
        return value
    return parsed.strftime(java_to_strftime(pattern))


@lru_cache(maxsize=256)
def _compile_path(expression: str):
    return jsonpath_parse(expression)


def jsonpath(value: Any, expression: str) -> List[Any]:
    """
    All values matched by a JSONPath expression.

    Fragment results are unwrapped first, so ``jsonpath(fragment('f'), '$.x')``
    queries the expanded fragment.
    """
    return [match.value for match in _compile_path(expression).find(to_native(value))]


def jsonpath_first(value: Any, expression: str) -> Any:
    """The first JSONPath match; no match is an evaluation failure."""
    matches = jsonpath(value, expression)
    if not matches:
        raise LookupError(f"No match for JSONPath '{expression}'")
    return matches[0]


def compute_functions() -> Dict[str, Callable]:
    """Return the optional library as a name -> function mapping."""
    return {
        "format_date": format_date,
        "jsonpath": jsonpath,
        "jsonpath_first": jsonpath_first,
    }
