"""Plugin discovery and override registration.

This module defines the declarative `Plugin` container and the registry
that collects plugin overrides and serves them to the resolver.

Plugins are discovered via Python entry points and loaded defensively:
individual failures do not interrupt the loading process unless strict
mode is enabled. Each plugin may override entries of any category or
supply new ones.

Example:
    Declaring a plugin in a package:

        from lazycore.catalog import derive
        from lazycore.plugins import Plugin

        cdn = Plugin(
            name='cdn',
            entries={
                'urls': {'assets': 'https://cdn.example.com/assets'},
                'components': {'snippet': derive(lambda core: wrap(core['snippet']))},
            },
        )

    and exposing it in `pyproject.toml`:

        [project.entry-points.lazycore_plugins]
        cdn = "my_package.plugins:cdn"
"""

from types import MappingProxyType
from typing import TYPE_CHECKING, Any
from warnings import warn

from pydantic import Field, ValidationError, field_validator

from lazycore.catalog import Producer, ensure_producer
from lazycore.errors import PluginError, PluginWarning
from lazycore.models import SchemaModel
from lazycore.names import CategoryName, EntryName, PluginName  # noqa: TC001
from lazycore.settings import PLUGINS_GROUP

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from importlib.metadata import EntryPoint


class Plugin(SchemaModel):
    """Declarative container for plugin overrides.

    Plugin instances do not execute logic themselves. They are consumed
    by the registry, which detects conflicts and serves the declared
    producers as overrides. Plain values are wrapped as constants.
    """

    name: PluginName = Field(
        title='Plugin namespace',
        description=(
            'Logical namespace of the plugin. '
            'Used for identification, diagnostics, and conflict detection.'
        ),
    )

    version: int = Field(
        default=1,
        title='Plugin contract version',
        description=(
            'Version of the plugin contract. '
            'This is not a semantic version of the plugin implementation.'
        ),
    )

    entries: dict[CategoryName, dict[EntryName, Producer]] = Field(
        default_factory=dict,
        title='Entries',
        description=(
            'Producers keyed by category and entry name. '
            'They replace core entries with the same name or add new ones.'
        ),
    )

    @field_validator('entries', mode='before')
    @classmethod
    def wrap_plain_values(cls, value: Any) -> Any:  # noqa: ANN401
        """Wrap plain values into constant producers."""
        if not isinstance(value, dict):
            return value

        return {
            category: {
                name: ensure_producer(item)
                for name, item in items.items()
            } if isinstance(items, dict) else items
            for category, items in value.items()
        }


class PluginRegistry:
    """Registry of plugin overrides implementing the override provider.

    Attributes:
        strict_mode: If True, any plugin issue raises an error. If False,
            issues are emitted as warnings, loading continues and the
            last registration wins.
    """

    strict_mode: bool = False

    plugins: dict[str, Plugin]

    def __init__(self, strict: bool = False) -> None:
        """Initialize an empty registry.

        Args:
            strict: Whether plugin issues raise errors instead of warnings.
        """
        self.strict_mode = strict

        self.clear_plugins()

    def add_plugin(self, plugin: Plugin,
                   entrypoint: 'EntryPoint | None' = None) -> None:
        """Register every override declared by a plugin.

        Args:
            plugin: Declarative plugin definition.
            entrypoint: Entry point from which the plugin was loaded,
                if applicable. Used for diagnostics and warnings.

        Raises:
            PluginError: If the plugin shadows existing overrides on
                strict mode.
        """
        module = entrypoint.value if entrypoint else plugin.name

        if plugin.name in self.plugins and (error := self.emit_plugin_issue(
            f'Plugin {plugin.name!r} from {module!r} is registered twice',
            entrypoint,
        )):
            raise error

        for category, entries in plugin.entries.items():
            overrides = self._overrides.setdefault(category, {})
            for name, producer in entries.items():
                if name in overrides and (error := self.emit_plugin_issue(
                    f'Entry {category}.{name} from {module!r} is shadowing '
                    f'an override of {self._sources[category, name]!r}',
                    entrypoint,
                )):
                    raise error

                overrides[name] = producer
                self._sources[category, name] = plugin.name

        self.plugins[plugin.name] = plugin

    def lookup_override(self, category: str, name: str) -> Producer | None:
        """Return the override producer of an entry, if any."""
        return self._overrides.get(category, {}).get(name)

    def overrides(self, category: str) -> 'Mapping[str, Producer]':
        """Return all override producers of a category in registration order."""
        return MappingProxyType(self._overrides.get(category, {}))

    def source(self, category: str, name: str) -> str | None:
        """Return the name of the plugin overriding an entry, if any."""
        return self._sources.get((category, name))

    def validate(self, categories: 'Iterable[str]') -> None:
        """Check that overrides only target known categories.

        Args:
            categories: Names of the categories declared by the catalog.

        Raises:
            PluginError: If an override targets an unknown category on
                strict mode.
        """
        known = set(categories)

        for category in self._overrides:
            if category not in known and (error := self.emit_plugin_issue(
                f'Overrides target an unknown category {category!r}',
            )):
                raise error

    def emit_plugin_issue(self, message: str,
                          entrypoint: 'EntryPoint | None' = None) -> Exception | None:
        """Emit a plugin warning or return the exception.

        Args:
            message: Warning message to emit.
            entrypoint: Entry point from which the plugin was loaded, if applicable.

        Returns:
            PluginError on strict mode, otherwise `None`
                with producing a PluginWarning.
        """
        if self.strict_mode:
            return PluginError(message, entrypoint=entrypoint)

        warn(message, category=PluginWarning, stacklevel=2)

        return None

    def clear_plugins(self) -> None:
        """Clear all registered plugins and overrides."""
        self.plugins = {}
        self._overrides: dict[str, dict[str, Producer]] = {}
        self._sources: dict[tuple[str, str], str] = {}

    def load_plugins(self, group: str = PLUGINS_GROUP) -> None:
        """Load plugins via entry points and register their overrides.

        Args:
            group: Entry point group to scan.

        Raises:
            PluginError: If any loading issues occur on strict mode.
        """
        from importlib.metadata import entry_points  # noqa: PLC0415

        for entrypoint in entry_points().select(group=group):
            self._load_plugin(entrypoint)

    def _load_plugin(self, entrypoint: 'EntryPoint') -> None:
        """Load and register a single plugin entry point.

        Args:
            entrypoint: Entry point describing the plugin to load.

        Raises:
            PluginError: If any loading issues occur on strict mode.
        """
        try:
            plugin = entrypoint.load()

        except ValidationError as base:
            if error := self.emit_plugin_issue(
                f'Failed to validate entrypoint {entrypoint.name!r}',
                entrypoint,
            ):
                raise error from base
            return None

        except Exception as base:
            if error := self.emit_plugin_issue(
                f'Failed to load entrypoint {entrypoint.name!r}',
                entrypoint,
            ):
                raise error from base
            return None

        if not isinstance(plugin, Plugin):
            if error := self.emit_plugin_issue(
                f'Loaded from entrypoint {entrypoint.name!r} object is not a plugin',
                entrypoint,
            ):
                raise error
            return None

        self.add_plugin(plugin, entrypoint)

        return None
