"""Host context interface and option lookups.

The host context is the read-only view of the application that
derivations and host-aware units may consult: configuration options and
the current request path.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol

from lazycore.names import CATEGORY_PATTERN

if TYPE_CHECKING:
    from lazycore.values import Value

_MISSING = object()


class HostContext(Protocol):
    """Protocol for host contexts."""

    def option(self, key: str, default: 'Value' = None) -> 'Value':
        """Return a configuration option.

        Args:
            key: Option key, dots separate nesting levels.
            default: Value returned when the option is not set.
        """
        ...  # pragma: no cover

    def path(self) -> str:
        """Return the current request path."""
        ...  # pragma: no cover


class OptionLookup:
    """Resolver for dotted-path option access.

    Options may be declared flat (`{'api.slug': 'rest'}`) or nested
    (`{'api': {'slug': 'rest'}}`). A flat key wins over a nested one.

    The lookup is tolerant: any missing key, invalid index or type
    mismatch results in the default value instead of an exception.
    """

    def __init__(self, key: str) -> None:
        """Initialize the lookup with a dotted key.

        Args:
            key: Dot-separated key. Each segment is a mapping key, or a
                list index if it is numeric.

        Raises:
            ValueError: If the first segment is not a valid identifier.
        """
        self.key = key.strip()
        self.path = self.key.split('.')

        if not CATEGORY_PATTERN.match(self.path[0]):
            raise ValueError(f'Invalid option key {key!r}')

    def __call__(self, options: Mapping[str, 'Value'], default: 'Value' = None) -> 'Value':
        """Resolve the key against options."""
        if self.key in options:
            return options[self.key]

        value = self.resolve(options)
        if value is _MISSING:
            return default

        return value

    def resolve(self, val: 'Value', depth: int = 1) -> 'Value':
        """Resolve the dotted path against a value.

        Args:
            val: Current value being resolved.
            depth: Current depth of traversal (used internally).

        Returns:
            The resolved value, or a private sentinel if the path does
            not exist.
        """
        if depth > len(self.path):
            return val

        key = self.path[depth - 1]
        if not key:
            return _MISSING

        if key.isdecimal() and isinstance(val, (list, tuple)):
            index = int(key)
            if not 0 <= index < len(val):
                return _MISSING
            return self.resolve(val[index], depth + 1)

        if isinstance(val, Mapping) and key in val:
            return self.resolve(val[key], depth + 1)

        return _MISSING
