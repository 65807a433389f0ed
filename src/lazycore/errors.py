"""Core exception hierarchy.

This module defines base error and warning types used across the library
to report undefined entries, declaration-order bugs in ordered categories,
producer failures, invalid catalogs and plugin loading issues in a
structured and extensible way.
"""

from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from yaml import safe_dump

from lazycore.values import plain

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from importlib.metadata import EntryPoint
    from pathlib import Path
    from typing import Self

SNIPPET_ELLIPSIS = f' ...{linesep}'
SNIPPET_INDENT = 2

FORMAT_INDENT = 4


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Name of the category being resolved.
    category: str | None
    #: Name of the entry being resolved or referenced.
    entry: str | None

    #: Path of the definition file involved in the failure.
    path: str | None

    #: Entries already resolved when the failure occurred.
    resolved: 'Mapping[str, Any] | None'

    #: Underlying exception that triggered formatting.
    error: Exception | None


class ErrorFormatter:
    """Utility class for formatting resolution errors.

    Produces human-readable messages with the failing category and entry
    and, when available, a YAML snippet of the values resolved so far.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location and data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        location = cls.get_location_string(context, indent=FORMAT_INDENT)
        if not location:
            return message

        message += linesep
        message += location
        message += cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        return message

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format category, entry and file information.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string, or an empty string if the
            context carries no location.
        """
        indent = cls._ensure_indent(indent)

        message = ''
        if category := context.get('category'):
            message += f'{indent}in category "{category}"'
            if entry := context.get('entry'):
                message += f', entry "{entry}"'
            message += linesep

        if path := context.get('path'):
            message += f'{indent}from "{path}"{linesep}'

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a snippet with the values resolved before the failure.

        Args:
            context: Error context containing resolved values.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted multi-line snippet string, or an empty string
            if nothing was resolved.
        """
        indent = cls._ensure_indent(indent)

        resolved = context.get('resolved')
        if not resolved:
            return ''

        snippet = f'{indent}{SNIPPET_ELLIPSIS}'
        snippet += cls._make_yaml({'resolved': resolved}, indent)
        snippet += linesep

        return snippet

    @classmethod
    def _make_yaml(cls, value: Any, indent: str = '') -> str:  # noqa: ANN401
        """Serialize a value to an indented YAML string.

        Args:
            value: Arbitrary value to serialize.
            indent: Optional indentation prefix.

        Returns:
            A YAML-formatted string representation of the value.
        """
        data = safe_dump(
            plain(value),
            indent=SNIPPET_INDENT,
            sort_keys=False,
        )

        return cls._make_indent(data, indent)

    @staticmethod
    def _make_indent(value: str, indent: str) -> str:
        """Apply indentation to a multi-line string.

        Empty or whitespace-only lines are omitted.
        """
        if not indent:
            return value

        return linesep.join(
            f'{indent}{line}'
            for line in value.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input to a string."""
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class PluginWarning(UserWarning):
    """Warning emitted for non-fatal plugin-related issues.

    Used when a plugin cannot be loaded or shadows another override, but
    the issue does not prevent further resolution (non-strict mode).
    """


class CoreError(Exception, ErrorFormatter):
    """Base exception for all lazycore errors.

    All custom exceptions raised by the library inherit from this class
    to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context containing optional location and values.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return self.format(self.message, self.context)


class UndefinedEntry(CoreError, KeyError):
    """Error raised when a name is not defined in a category.

    Raised both for unknown entries and for unknown categories, when no
    override supplies the requested name either. It is also a `KeyError`
    so mapping-style callers keep working.
    """

    @classmethod
    def for_entry(cls, category: str, name: str) -> 'Self':
        """Create an error for an undefined entry.

        Args:
            category: Name of the queried category.
            name: Name of the missing entry.

        Returns:
            An initialized UndefinedEntry instance.
        """
        return cls(
            f'Entry {name!r} is not defined',
            context=ErrorContext(category=category, entry=name),
        )

    @classmethod
    def for_category(cls, category: str) -> 'Self':
        """Create an error for an undefined category.

        Args:
            category: Name of the missing category.

        Returns:
            An initialized UndefinedEntry instance.
        """
        return cls(f'Category {category!r} is not defined')


class UnresolvedReference(CoreError, KeyError):
    """Error raised when a derivation reads a name not resolved yet.

    Within an ordered category a derivation may only reference entries
    declared before it. Referencing a later or misspelled name is a
    declaration-order bug, and the whole category resolution fails.
    """

    @classmethod
    def for_reference(cls, category: str, name: str,
                      resolved: 'Mapping[str, Any] | None' = None) -> 'Self':
        """Create an error for a reference to an unresolved entry.

        Args:
            category: Name of the category being resolved.
            name: Name referenced by the derivation.
            resolved: Entries resolved before the failing reference.

        Returns:
            An initialized UnresolvedReference instance.
        """
        return cls(
            f'Reference to unresolved entry {name!r}',
            context=ErrorContext(
                category=category,
                entry=name,
                resolved=dict(resolved) if resolved else None,
            ),
        )


class ProducerFailure(CoreError):
    """Error raised when a definition file cannot be loaded.

    The error is chained to the original exception. It is never cached,
    so a later request retries the load.
    """

    def __init__(self, message: str, *,
                 path: 'Path | None' = None) -> None:
        """Initialize a producer failure.

        Args:
            message: Human-readable error description.
            path: Definition file associated with the failure.
        """
        self.path = path

        super().__init__(message, context=ErrorContext(
            path=str(path) if path is not None else None,
        ))


class CatalogError(CoreError):
    """Error raised when a declaration is invalid or inconsistent.

    Used for catalog declarations that cannot be expressed at the model
    level, such as overriding entries of a unit that is not a mapping.
    """

    @classmethod
    def from_names(cls, message: str, names: 'Iterable[str]') -> 'Self':
        """Create a catalog error listing offending names.

        Args:
            message: Base human-readable error message.
            names: Offending names.

        Returns:
            An initialized CatalogError instance.
        """
        return cls(f'{message}: {", ".join(sorted(names))}')


class PluginError(CoreError):
    """Error raised for fatal plugin-related failures.

    Raised when a plugin entry point is invalid, misconfigured, or fails
    to load in strict mode.
    """

    def __init__(self, message: str, *,
                 entrypoint: 'EntryPoint | None' = None) -> None:
        """Initialize a plugin error.

        Args:
            message: Human-readable error description.
            entrypoint: Optional plugin entry point associated with the error.
        """
        self.entrypoint = entrypoint

        super().__init__(message)
