"""Lazy resolution and memoization engine.

The resolver evaluates catalog entries on demand, caches each result for
the lifetime of the resolver and supplies already-resolved sibling values
to derivations.

Every lookup has two access paths:
- the effective path (default) consults the override provider first;
- the core path (`core=True`) ignores overrides and always returns the
  original definition, so higher layers can reach it even when a plugin
  has replaced it.

The primary public entry point is `Resolver`.
"""

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from lazycore.catalog import Constant, Derived, File, OrderedCategory, StaticCategory, UnitCategory
from lazycore.errors import CatalogError, ProducerFailure, UndefinedEntry

from .cache import CORE, EFFECTIVE, CacheKey, LazyCache
from .loader import FileLoader, Loader
from .ordered import ResolvedView, resolve_ordered
from .overrides import NoOverrides, OverrideProvider

if TYPE_CHECKING:
    from pathlib import Path

if TYPE_CHECKING:
    from lazycore.catalog import Catalog, Producer
    from lazycore.context import HostContext
    from lazycore.values import Value

__all__ = (
    'CacheKey',
    'FileLoader',
    'LazyCache',
    'Loader',
    'NoOverrides',
    'OverrideProvider',
    'ResolvedView',
    'Resolver',
    'resolve_ordered',
)


class CoreValues(Mapping[str, Any]):
    """Lazy mapping over the core values of a static category.

    Values are resolved through the resolver on access, so a derivation
    only triggers the siblings it actually reads.
    """

    def __init__(self, resolver: 'Resolver', category: StaticCategory,
                 exclude: str | None = None) -> None:
        """Initialize the mapping.

        Args:
            resolver: Resolver owning the cache.
            category: Static category declaration.
            exclude: Entry hidden from the mapping, usually the entry
                being resolved.
        """
        self.resolver = resolver
        self.category = category
        self.exclude = exclude

    def __getitem__(self, name: str) -> Any:  # noqa: ANN401
        """Resolve a sibling through the core path.

        Raises:
            KeyError: If the name is hidden or not declared. Failures of
                the sibling itself propagate unchanged.
        """
        if name not in self:
            raise KeyError(name)

        return self.resolver.get(self.category.name, name, core=True)

    def __contains__(self, name: object) -> bool:
        """Check whether a sibling is declared without resolving it."""
        return name != self.exclude and name in self.category.entries

    def __iter__(self) -> Iterator[str]:
        """Iterate over declared names."""
        return (name for name in self.category.entries if name != self.exclude)

    def __len__(self) -> int:
        """Return the number of visible entries."""
        return sum(1 for _ in self)


class Resolver:
    """Lazy, memoized resolver of catalog entries.

    One resolver is created per application run and owns its cache.
    Nothing is ever evicted, except through `invalidate`.
    """

    def __init__(self, catalog: 'Catalog', host: 'HostContext | None' = None,
                 loader: Loader | None = None,
                 overrides: OverrideProvider | None = None) -> None:
        """Initialize a resolver.

        Args:
            catalog: Catalog of categories to resolve.
            host: Host context exposed to derivations and host-aware units.
            loader: Loader for definition files. Defaults to `FileLoader`.
            overrides: Override provider. Defaults to no overrides.
        """
        self.catalog = catalog
        self.host = host
        self.loader: Loader = loader or FileLoader()
        self.overrides: OverrideProvider = overrides or NoOverrides()
        self.cache = LazyCache()

    def get(self, category: str, name: str, *, core: bool = False) -> 'Value':
        """Return the value of one entry.

        Args:
            category: Name of the category.
            name: Name of the entry.
            core: Whether to ignore overrides.

        Returns:
            The resolved value.

        Raises:
            UndefinedEntry: If the category or the entry is not defined
                and no override supplies it.
            UnresolvedReference: If an ordered category has a
                declaration-order bug.
            ProducerFailure: If a definition file cannot be loaded.
            Any exception raised by derivations or units.
        """
        declaration = self.catalog.category(category)

        if isinstance(declaration, StaticCategory):
            return self._get_static(declaration, name, core=core)

        values = self.get_category(category, core=core)
        if not isinstance(values, Mapping) or name not in values:
            raise UndefinedEntry.for_entry(category, name)

        return values[name]

    def get_category(self, category: str, *, core: bool = False) -> 'Value':
        """Return a whole category.

        Ordered and static categories resolve to read-only mappings.
        Unit categories resolve to the value of their definition, as is.

        Args:
            category: Name of the category.
            core: Whether to ignore overrides.

        Returns:
            The resolved category.

        Raises:
            UndefinedEntry: If the category is not defined.
            UnresolvedReference: If an ordered category has a
                declaration-order bug. Nothing is cached then.
            ProducerFailure: If a definition file cannot be loaded.
            Any exception raised by derivations or units.
        """
        declaration = self.catalog.category(category)

        if isinstance(declaration, OrderedCategory):
            return self._get_ordered(declaration, core=core)

        if isinstance(declaration, StaticCategory):
            return self._get_static_all(declaration, core=core)

        return self._get_unit(declaration, core=core)

    def paths(self, category: str, *, core: bool = False) -> dict[str, 'Path']:
        """List definition file paths of a category without loading them.

        Args:
            category: Name of the category.
            core: Whether to ignore overrides.

        Returns:
            Mapping of entry names to definition file paths. A unit
            category lists its own definition file.

        Raises:
            UndefinedEntry: If the category is not defined.
        """
        declaration = self.catalog.category(category)

        if isinstance(declaration, UnitCategory):
            return {declaration.name: declaration.path}

        entries = self._merge_entries(declaration, core=core)

        return {
            name: producer.path
            for name, producer in entries.items()
            if isinstance(producer, File)
        }

    def invalidate(self, category: str) -> None:
        """Forget cached values of a category in both access paths.

        Intended for tests and resets. The next access recomputes.

        Raises:
            UndefinedEntry: If the category is not defined.
        """
        self.catalog.category(category)
        self.cache.invalidate(category)

    def produce(self, producer: 'Producer', view: ResolvedView) -> 'Value':
        """Invoke one producer.

        Args:
            producer: Producer declaration.
            view: Resolved values visible to a derivation.

        Returns:
            The produced value.
        """
        if isinstance(producer, Constant):
            return producer.value

        if isinstance(producer, File):
            return self.loader.load(producer.path)

        if isinstance(producer, Derived):
            return producer.derive(view)

        raise TypeError(f'{producer!r} is not a producer')

    def _overrides_for(self, category: str, *, core: bool) -> Mapping[str, 'Producer']:
        """Return override producers of a category on the effective path."""
        if core:
            return MappingProxyType({})

        return self.overrides.overrides(category)

    def _merge_entries(self, declaration: OrderedCategory | StaticCategory, *,
                       core: bool) -> dict[str, 'Producer']:
        """Merge override producers into declared ones.

        Overrides keep the position of the entry they replace; new names
        are appended in registration order.
        """
        return {
            **declaration.entries,
            **self._overrides_for(declaration.name, core=core),
        }

    def _get_ordered(self, declaration: OrderedCategory, *, core: bool) -> Mapping[str, Any]:
        """Resolve an ordered category as a whole."""
        if not self._overrides_for(declaration.name, core=core):
            layer, entries = CORE, declaration.entries
        else:
            layer, entries = EFFECTIVE, self._merge_entries(declaration, core=core)

        return self.cache.get(
            CacheKey(layer, declaration.name),
            lambda: resolve_ordered(declaration.name, entries, self.produce, self.host),
        )

    def _get_static(self, declaration: StaticCategory, name: str, *, core: bool) -> 'Value':
        """Resolve one entry of a static category.

        Core derivations see their siblings but not themselves. Override
        derivations see every core value, including the one they replace.
        """
        if not core and (override := self.overrides.lookup_override(declaration.name, name)) is not None:
            view = ResolvedView(declaration.name, CoreValues(self, declaration), self.host)
            return self.cache.get(
                CacheKey(EFFECTIVE, declaration.name, name),
                lambda: self.produce(override, view),
            )

        producer = declaration.entries.get(name)
        if producer is None:
            raise UndefinedEntry.for_entry(declaration.name, name)

        view = ResolvedView(declaration.name, CoreValues(self, declaration, exclude=name), self.host)

        return self.cache.get(
            CacheKey(CORE, declaration.name, name),
            lambda: self.produce(producer, view),
        )

    def _get_static_all(self, declaration: StaticCategory, *, core: bool) -> Mapping[str, Any]:
        """Resolve every entry of a static category."""
        return MappingProxyType({
            name: self._get_static(declaration, name, core=core)
            for name in self._merge_entries(declaration, core=core)
        })

    def _get_unit(self, declaration: UnitCategory, *, core: bool) -> 'Value':
        """Load a unit category and apply overrides on the effective path."""
        value = self.cache.get(
            CacheKey(CORE, declaration.name),
            lambda: self._load_unit(declaration),
        )

        overrides = self._overrides_for(declaration.name, core=core)
        if not overrides:
            return value

        if not isinstance(value, Mapping):
            raise CatalogError(f'Unit {declaration.name!r} is not a mapping and can not be overridden')

        view = ResolvedView(declaration.name, value, self.host)

        return self.cache.get(
            CacheKey(EFFECTIVE, declaration.name),
            lambda: {
                **value,
                **{name: self.produce(producer, view) for name, producer in overrides.items()},
            },
        )

    def _load_unit(self, declaration: UnitCategory) -> 'Value':
        """Load the definition file of a unit category.

        Raises:
            ProducerFailure: If the file cannot be loaded, or a host-aware
                unit does not define a callable.
        """
        value = self.loader.load(declaration.path)
        if not declaration.with_host:
            return value

        if not callable(value):
            raise ProducerFailure(
                f'Unit {declaration.name!r} must define a callable',
                path=declaration.path,
            )

        return value(self.host)
