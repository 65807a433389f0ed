"""Runtime settings for the host application.

Settings are resolved once from keyword arguments and `LAZYCORE_*`
environment variables, for example:

    LAZYCORE_INDEX_ROOT=/var/www/site
    LAZYCORE_OPTIONS='{"url": "https://example.com", "api": {"slug": "rest"}}'
    LAZYCORE_STRICT=false
"""

from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from lazycore.models import SettingsModel

#: Directory of the installed package, the default core root.
PACKAGE_ROOT = Path(__file__).resolve().parent

#: Entry point group scanned for plugins.
PLUGINS_GROUP = 'lazycore_plugins'


class CoreSettings(SettingsModel):
    """Settings of one application run."""

    model_config = SettingsConfigDict(env_prefix='LAZYCORE_')

    kirby_root: Path = Field(
        default=PACKAGE_ROOT,
        title='Core root',
        description='Root directory of the core installation.',
    )

    definitions_root: Path | None = Field(
        default=None,
        title='Definitions root',
        description=(
            'Directory holding core definition files (components, routes, '
            'tags, field methods, areas, blueprints, ...). '
            'Defaults to the `config` directory inside the core root.'
        ),
    )

    index_root: Path = Field(
        default_factory=Path.cwd,
        title='Index root',
        description='Root directory of the site being served.',
    )

    options: dict[str, Any] = Field(
        default_factory=dict,
        title='Options',
        description='Host configuration options, such as `url` or `api.slug`.',
    )

    strict: bool = Field(
        default=True,
        title='Strict plugins',
        description='Whether plugin issues raise errors instead of warnings.',
    )

    plugins: bool = Field(
        default=True,
        title='Load plugins',
        description='Whether plugins are discovered via entry points.',
    )

    plugin_group: str = Field(
        default=PLUGINS_GROUP,
        title='Plugin entry point group',
        description='Entry point group scanned for plugins.',
    )

    def get_definitions_root(self) -> Path:
        """Return the directory holding core definition files."""
        if self.definitions_root is not None:
            return self.definitions_root

        return self.kirby_root / 'config'
