"""Override provider interface.

Before falling back to the core producer of an entry, the resolver asks
an override provider whether a plugin supplies another producer for the
same name. Providers return producers, not values, so overrides are
resolved and cached like any core entry.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from lazycore.catalog import Producer


class OverrideProvider(Protocol):
    """Protocol for override providers."""

    def lookup_override(self, category: str, name: str) -> 'Producer | None':
        """Return the override producer of an entry, if any.

        Args:
            category: Name of the category.
            name: Name of the entry.
        """
        ...  # pragma: no cover

    def overrides(self, category: str) -> Mapping[str, 'Producer']:
        """Return all override producers of a category in registration order.

        Args:
            category: Name of the category.
        """
        ...  # pragma: no cover


class NoOverrides:
    """Override provider supplying nothing."""

    def lookup_override(self, category: str, name: str) -> 'Producer | None':  # noqa: ARG002
        """Never find an override."""
        return None

    def overrides(self, category: str) -> Mapping[str, 'Producer']:  # noqa: ARG002
        """Return an empty mapping."""
        return MappingProxyType({})
