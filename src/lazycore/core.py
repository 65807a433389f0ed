"""Core facade.

The `Core` class lists all parts of the system that need to be loaded or
initialized: roots, URLs, components, routes, kirbytags, field methods,
areas, blueprints, fields, sections, snippets and templates. Most core
parts can be overridden by plugins.

Listing methods for file catalogs (`areas`, `blueprints`, `fields`, ...)
return definition file paths without loading them. Singular methods
(`area`, `blueprint`, `field`, ...) load one definition.

`Core.load()` returns a view that ignores plugins, giving access to the
original core definitions even when a plugin has replaced them.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

if TYPE_CHECKING:
    from lazycore.context import HostContext
    from lazycore.resolver import Resolver
    from lazycore.values import Value


class Core:
    """Named access to every core category."""

    def __init__(self, host: 'HostContext', resolver: 'Resolver', *,
                 plugins: bool = True) -> None:
        """Initialize the facade.

        Args:
            host: Host context owning the resolver.
            resolver: Resolver shared by every view of the core.
            plugins: Whether lookups consult plugin overrides.
        """
        self.host = host
        self.resolver = resolver
        self.plugins = plugins

    def load(self) -> 'Core':
        """Return a view of the core that ignores plugins.

        The view shares the resolver and its cache.
        """
        return Core(self.host, self.resolver, plugins=False)

    def get(self, category: str, name: str) -> 'Value':
        """Return the value of one entry of a category."""
        return self.resolver.get(category, name, core=not self.plugins)

    def category(self, category: str) -> 'Value':
        """Return a whole resolved category."""
        return self.resolver.get_category(category, core=not self.plugins)

    def paths(self, category: str) -> dict[str, 'Path']:
        """Return definition file paths of a category."""
        return self.resolver.paths(category, core=not self.plugins)

    def invalidate(self, category: str) -> None:
        """Forget cached values of a category."""
        self.resolver.invalidate(category)

    def area(self, name: str) -> 'Value':
        """Load the core definition of a panel area.

        Shortcut for `load().get('areas', name)`: plugins extending an
        area get the original definition, whatever the view.
        """
        return self.load().get('areas', name)

    def areas(self) -> dict[str, 'Path']:
        """Return paths to all area definition files."""
        return self.paths('areas')

    def auth_challenges(self) -> 'Mapping[str, Any]':
        """Return factories of authentication challenges."""
        return self.category('auth_challenges')

    def blueprint(self, name: str) -> 'Value':
        """Load a core blueprint."""
        return self.get('blueprints', name)

    def blueprint_presets(self) -> dict[str, 'Path']:
        """Return paths to blueprint preset files."""
        return self.paths('blueprint_presets')

    def blueprints(self) -> dict[str, 'Path']:
        """Return paths to core blueprints, block blueprints included."""
        return self.paths('blueprints')

    def cache_types(self) -> 'Mapping[str, Any]':
        """Return factories of cache drivers keyed by type."""
        return self.category('cache_types')

    def component(self, name: str) -> 'Value':
        """Return one core component function."""
        return self.get('components', name)

    def components(self) -> 'Value':
        """Return all core component functions.

        They are loaded once from `components.py` in the definitions root.
        """
        return self.category('components')

    def field(self, name: str) -> 'Value':
        """Load the definition of a panel field."""
        return self.get('fields', name)

    def field_method_aliases(self) -> 'Mapping[str, str]':
        """Return a map of all field method aliases."""
        return self.category('field_method_aliases')

    def field_methods(self) -> 'Value':
        """Return all field method functions.

        They are built once by the callable in `methods.py`, which
        receives the host.
        """
        return self.category('field_methods')

    def field_mixins(self) -> dict[str, 'Path']:
        """Return paths to field mixins."""
        return self.paths('field_mixins')

    def fields(self) -> dict[str, 'Path']:
        """Return paths to all panel field definitions."""
        return self.paths('fields')

    def kirbytag_aliases(self) -> 'Mapping[str, str]':
        """Return a map of all kirbytag aliases."""
        return self.category('kirbytag_aliases')

    def kirbytags(self) -> 'Value':
        """Return all kirbytag definitions."""
        return self.category('kirbytags')

    def root(self, name: str) -> 'Path':
        """Return one absolute directory path."""
        return self.get('roots', name)

    def roots(self) -> 'Mapping[str, Path]':
        """Return all absolute paths to important directories."""
        return self.category('roots')

    def routes(self) -> 'Value':
        """Return all routes, split into `before` and `after` routes.

        Plugin routes are expected to be injected in between by the router.
        """
        return self.category('routes')

    def section(self, name: str) -> 'Value':
        """Load the definition of a panel section."""
        return self.get('sections', name)

    def section_mixins(self) -> dict[str, 'Path']:
        """Return paths to section mixins."""
        return self.paths('section_mixins')

    def sections(self) -> dict[str, 'Path']:
        """Return paths to all section definitions."""
        return self.paths('sections')

    def snippets(self) -> 'Mapping[str, Path]':
        """Return paths to core block snippets."""
        return self.category('snippets')

    def templates(self) -> 'Mapping[str, Path]':
        """Return paths to system templates."""
        return self.category('templates')

    def url(self, name: str) -> str:
        """Return one system URL."""
        return self.get('urls', name)

    def urls(self) -> 'Mapping[str, str]':
        """Return all system URLs."""
        return self.category('urls')
