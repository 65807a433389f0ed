"""Ordered whole-category resolution.

Entries of an ordered category reference each other, and declaration
order is their dependency order: a derivation may only read entries
declared before it. The category is resolved in a single pass into an
accumulator, and the accumulator becomes the resolved category only
once every entry succeeded.
"""

from collections.abc import Callable, Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from lazycore.errors import UnresolvedReference

if TYPE_CHECKING:
    from lazycore.catalog import Producer
    from lazycore.context import HostContext
    from lazycore.values import Value

#: Callable producing one entry value from a producer and a view.
type Produce = Callable[['Producer', 'ResolvedView'], 'Value']


class ResolvedView(Mapping[str, Any]):
    """Read-only view of entries already resolved in a category.

    Reading a missing name raises `UnresolvedReference` instead of
    returning a default. Because the error is also a `KeyError`, `get`
    with an explicit default and the `in` operator behave as usual.

    The view also exposes the host, so derivations can read options or
    the request path without capturing it.
    """

    def __init__(self, category: str, values: Mapping[str, Any],
                 host: 'HostContext | None' = None) -> None:
        """Initialize a view.

        Args:
            category: Name of the category being resolved.
            values: Resolved values backing the view.
            host: Host context available to derivations.
        """
        self.category = category
        self._values = values
        self._host = host

    @property
    def host(self) -> 'HostContext':
        """Host context of the resolution.

        Raises:
            RuntimeError: If the view was created without a host.
        """
        if self._host is None:
            raise RuntimeError(f'No host available while resolving {self.category!r}')

        return self._host

    def __getitem__(self, name: str) -> Any:  # noqa: ANN401
        """Return a resolved value or fail loudly.

        Only a name absent from the backing mapping is reported here.
        Errors raised while producing a present value propagate as is.
        """
        if name not in self._values:
            resolved = self._values if isinstance(self._values, dict) else None
            raise UnresolvedReference.for_reference(self.category, name, resolved)

        return self._values[name]

    def __contains__(self, name: object) -> bool:
        """Check whether a name is visible without resolving it."""
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        """Iterate over resolved names."""
        return iter(self._values)

    def __len__(self) -> int:
        """Return the number of resolved entries."""
        return len(self._values)


def resolve_ordered(category: str, entries: 'Mapping[str, Producer]', produce: Produce,
                    host: 'HostContext | None' = None) -> Mapping[str, Any]:
    """Resolve every entry of a category in declaration order.

    Each producer receives a read-only view of the entries resolved
    before it. If any producer fails, the exception propagates and the
    partial accumulator is discarded.

    Args:
        category: Name of the category being resolved.
        entries: Producers in declaration order.
        produce: Callable invoking one producer with a view.
        host: Host context exposed through the view.

    Returns:
        A read-only mapping of all resolved entries.

    Raises:
        UnresolvedReference: If a derivation reads a name that is not
            resolved yet.
        Any exception raised by the producers.
    """
    resolved: dict[str, Any] = {}
    view = ResolvedView(category, resolved, host)

    for name, producer in entries.items():
        resolved[name] = produce(producer, view)

    return MappingProxyType(resolved)
