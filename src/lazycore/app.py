"""Host application.

The `App` is the host of one run: it owns the settings, the request
path, the configuration options, the plugin registry and exactly one
resolver. Everything needing resolution receives the app explicitly;
there is no module-level instance.

Options are merged from three sources, later ones winning:

1. `CoreSettings.options` (including `LAZYCORE_OPTIONS`);
2. `config.yml` in the `config` root, read on first use. The root is
   taken from the core roots, so roots overrides may read options;
3. the `options` keyword argument.
"""

from collections.abc import Mapping
from functools import cached_property
from pathlib import Path
from typing import TYPE_CHECKING, Any

from lazycore.catalog import core_catalog
from lazycore.context import OptionLookup
from lazycore.core import Core
from lazycore.errors import ProducerFailure, UndefinedEntry
from lazycore.plugins import PluginRegistry
from lazycore.resolver import FileLoader, Resolver
from lazycore.settings import CoreSettings

if TYPE_CHECKING:
    from lazycore.catalog import Catalog
    from lazycore.resolver import Loader
    from lazycore.values import Value

#: Site configuration file name inside the `config` root.
CONFIG_FILE = 'config.yml'


class App:
    """Host context of one application run."""

    def __init__(self, settings: CoreSettings | None = None, *,  # noqa: PLR0913
                 path: str = '',
                 options: dict[str, Any] | None = None,
                 catalog: 'Catalog | None' = None,
                 loader: 'Loader | None' = None,
                 plugins: PluginRegistry | None = None) -> None:
        """Initialize the application.

        Args:
            settings: Settings of the run. Read from the environment
                when omitted.
            path: Current request path.
            options: Options taking precedence over every other source.
            catalog: Catalog to resolve. Defaults to the core catalog.
            loader: Loader for definition files. Defaults to `FileLoader`.
            plugins: Prepared plugin registry. When omitted, a registry is
                created and, if enabled by settings, filled from entry points.

        Raises:
            PluginError: If plugins fail to load on strict mode.
        """
        self.settings = settings or CoreSettings()
        self.request_path = path

        self._options = dict(options or {})

        self.loader: Loader = loader or FileLoader()
        self.catalog = catalog or core_catalog(self.settings)

        if plugins is None:
            plugins = PluginRegistry(strict=self.settings.strict)
            if self.settings.plugins:
                plugins.load_plugins(self.settings.plugin_group)

        self.plugins = plugins
        self.plugins.validate(self.catalog.names())

        self.resolver = Resolver(self.catalog, self, self.loader, self.plugins)
        self.core = Core(self, self.resolver)

    @cached_property
    def options(self) -> dict[str, Any]:
        """Merged configuration options.

        Raises:
            ProducerFailure: If the site configuration file is malformed.
        """
        try:
            config = Path(self.core.load().root('config')) / CONFIG_FILE
        except UndefinedEntry:
            return {**self.settings.options, **self._options}

        if not config.is_file():
            return {**self.settings.options, **self._options}

        loaded = self.loader.load(config) or {}
        if not isinstance(loaded, Mapping):
            raise ProducerFailure('Site configuration must be a mapping', path=config)

        return {**self.settings.options, **loaded, **self._options}

    def option(self, key: str, default: 'Value' = None) -> 'Value':
        """Return a configuration option.

        Args:
            key: Option key, dots separate nesting levels (`api.slug`).
            default: Value returned when the option is not set.
        """
        return OptionLookup(key)(self.options, default)

    def path(self) -> str:
        """Return the current request path."""
        return self.request_path

    def root(self, name: str) -> 'Path':
        """Return one absolute directory path, plugins applied."""
        return self.core.root(name)

    def roots(self) -> Mapping[str, 'Path']:
        """Return all absolute directory paths, plugins applied."""
        return self.core.roots()

    def url(self, name: str) -> str:
        """Return one system URL, plugins applied."""
        return self.core.url(name)

    def urls(self) -> Mapping[str, str]:
        """Return all system URLs, plugins applied."""
        return self.core.urls()
