"""Core type definitions for resolved values.

This module defines the type aliases shared by the catalog and the
resolver. It distinguishes between resolved values, which are opaque
to the resolver, and derivations that compute a value from entries
already resolved in the same category.

It also provides a helper to turn resolved values into plain data for
YAML rendering in error snippets and on the command line.
"""

from collections.abc import Callable, Mapping
from datetime import date, datetime, timedelta
from pathlib import PurePath
from typing import Any

#: A resolved value is anything a producer returns. The resolver never
#: inspects it, except for unit categories queried by entry name.
type Value = Any

#: A derivation receives a read-only view of already-resolved sibling
#: entries and returns the value of its own entry.
type Derivation = Callable[[Mapping[str, Value]], Value]

#: Zero-argument callable invoked by the cache on a miss.
type Thunk = Callable[[], Value]

#: Placeholder for values that have no plain representation.
PLACEHOLDER = '<runtime object>'

MAPPINGS = (Mapping,)
SCALARS = (date, datetime, timedelta, str, bytes, int, float, bool)
SEQUENCES = (list, tuple, set, frozenset)


def plain(value: Value) -> Value:
    """Recursively convert a resolved value into plain data.

    Paths become strings, mappings become dicts with string keys and
    sequences become lists. Anything else, such as callables or class
    instances, is replaced with a placeholder.

    Args:
        value: Resolved value to convert.

    Returns:
        A structure made of scalars, lists and dicts only.
    """
    if value is None or isinstance(value, SCALARS):
        return value

    if isinstance(value, PurePath):
        return str(value)

    if isinstance(value, MAPPINGS):
        return {
            str(key): plain(item)
            for key, item in value.items()
        }

    if isinstance(value, SEQUENCES):
        return [plain(item) for item in value]

    return PLACEHOLDER
