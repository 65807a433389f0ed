"""Default core catalog.

This module declares every category the core knows about: filesystem
roots and public URLs (ordered categories whose entries derive from each
other), catalogs of definition files, alias tables, factory registries
and the expensive single-unit definitions (components, routes, tags and
field methods).

The catalog is pure declaration. Nothing is read, loaded or computed
until a value is requested through a resolver.
"""

from typing import TYPE_CHECKING

from .categories import Catalog, OrderedCategory, StaticCategory, UnitCategory
from .producers import Derived, constant, derive, file

if TYPE_CHECKING:
    from pathlib import Path

if TYPE_CHECKING:
    from lazycore.resolver.ordered import ResolvedView
    from lazycore.settings import CoreSettings

#: Core block types, each with a blueprint and a snippet.
BLOCKS = (
    'code',
    'gallery',
    'heading',
    'image',
    'line',
    'list',
    'markdown',
    'quote',
    'table',
    'text',
    'video',
)

#: Panel areas.
AREAS = (
    'account',
    'installation',
    'languages',
    'login',
    'site',
    'system',
    'users',
)

#: Panel field types.
FIELDS = (
    'blocks',
    'checkboxes',
    'date',
    'email',
    'files',
    'gap',
    'headline',
    'hidden',
    'info',
    'layout',
    'line',
    'list',
    'multiselect',
    'number',
    'pages',
    'radio',
    'range',
    'select',
    'slug',
    'structure',
    'tags',
    'tel',
    'text',
    'textarea',
    'time',
    'toggle',
    'url',
    'users',
    'writer',
)

#: Mixins shared by panel fields.
FIELD_MIXINS = (
    'datetime',
    'filepicker',
    'layout',
    'min',
    'options',
    'pagepicker',
    'picker',
    'upload',
    'userpicker',
)

#: Panel section types.
SECTIONS = (
    'fields',
    'files',
    'info',
    'pages',
)

#: Mixins shared by panel sections.
SECTION_MIXINS = (
    'empty',
    'headline',
    'help',
    'layout',
    'max',
    'min',
    'pagination',
    'parent',
)

#: Blueprint presets.
PRESETS = (
    'pages',
    'page',
    'files',
)

#: System templates.
TEMPLATES = (
    'emails/auth/login',
    'emails/auth/password-reset',
)

#: Directories placed directly inside the site root.
SITE_ROOTS = (
    'accounts',
    'blueprints',
    'cache',
    'collections',
    'config',
    'controllers',
    'languages',
    'logs',
    'models',
    'plugins',
    'sessions',
    'snippets',
    'templates',
)

FIELD_METHOD_ALIASES = {
    'bool': 'toBool',
    'esc': 'escape',
    'excerpt': 'toExcerpt',
    'float': 'toFloat',
    'h': 'html',
    'int': 'toInt',
    'kt': 'kirbytext',
    'kti': 'kirbytextinline',
    'link': 'toLink',
    'md': 'markdown',
    'sp': 'smartypants',
    'v': 'isValid',
    'x': 'xml',
}

KIRBYTAG_ALIASES = {
    'youtube': 'video',
    'vimeo': 'video',
}


def child(parent: str, *parts: str) -> Derived:
    """Declare a root nested inside an earlier root."""
    return derive(lambda roots: roots[parent].joinpath(*parts))


def index_url(urls: 'ResolvedView') -> str:
    """Return the configured site URL."""
    return urls.host.option('url', '/')


def base_url(urls: 'ResolvedView') -> str:
    """Return the site URL without a trailing slash."""
    return urls['index'].rstrip('/')


def current_url(urls: 'ResolvedView') -> str:
    """Return the URL of the current request path."""
    path = urls.host.path().strip('/')
    if not path:
        return urls['index']

    return f'{urls["base"]}/{path}'


def slug_url(option: str, default: str) -> Derived:
    """Declare a URL below the base URL with a configurable slug."""
    return derive(lambda urls: f'{urls["base"]}/{urls.host.option(option, default)}')


def roots_category(kirby_root: 'Path', index_root: 'Path') -> OrderedCategory:
    """Declare all absolute paths to important directories.

    Args:
        kirby_root: Root directory of the core installation.
        index_root: Root directory of the served site.

    Returns:
        The ordered `roots` category.
    """
    return OrderedCategory(
        name='roots',
        description='Absolute paths to important directories.',
        entries={
            'kirby': derive(lambda roots: kirby_root),
            'i18n': child('kirby', 'i18n'),
            'i18n:translations': child('i18n', 'translations'),
            'i18n:rules': child('i18n', 'rules'),
            'index': derive(lambda roots: index_root),
            'assets': child('index', 'assets'),
            'content': child('index', 'content'),
            'media': child('index', 'media'),
            'panel': child('kirby', 'panel'),
            'site': child('index', 'site'),
            **{name: child('site', name) for name in SITE_ROOTS},
            'license': child('config', '.license'),
            'roles': child('blueprints', 'users'),
        },
    )


def urls_category() -> OrderedCategory:
    """Declare all system URLs.

    Returns:
        The ordered `urls` category.
    """
    return OrderedCategory(
        name='urls',
        description='Public system URLs.',
        entries={
            'index': derive(index_url),
            'base': derive(base_url),
            'current': derive(current_url),
            'assets': derive(lambda urls: f'{urls["base"]}/assets'),
            'api': slug_url('api.slug', 'api'),
            'media': derive(lambda urls: f'{urls["base"]}/media'),
            'panel': slug_url('panel.slug', 'panel'),
        },
    )


def core_catalog(settings: 'CoreSettings') -> Catalog:
    """Build the default core catalog.

    Args:
        settings: Settings providing the core and site roots.

    Returns:
        A catalog with every core category.
    """
    root = settings.get_definitions_root()

    return Catalog.from_categories(
        roots_category(settings.kirby_root, settings.index_root),
        urls_category(),
        StaticCategory(
            name='areas',
            description='Panel area definitions.',
            entries={name: file(root / 'areas' / f'{name}.py') for name in AREAS},
        ),
        StaticCategory(
            name='auth_challenges',
            description='Factories of authentication challenges.',
        ),
        StaticCategory(
            name='blueprint_presets',
            description='Blueprint preset definitions.',
            entries={name: file(root / 'presets' / f'{name}.yml') for name in PRESETS},
        ),
        StaticCategory(
            name='blueprints',
            description='Core blueprints.',
            entries={
                **{f'blocks/{name}': file(root / 'blocks' / name / f'{name}.yml') for name in BLOCKS},
                'files/default': file(root / 'blueprints' / 'files' / 'default.yml'),
                'pages/default': file(root / 'blueprints' / 'pages' / 'default.yml'),
                'site': file(root / 'blueprints' / 'site.yml'),
            },
        ),
        StaticCategory(
            name='cache_types',
            description='Factories of cache drivers.',
        ),
        StaticCategory(
            name='field_method_aliases',
            description='Aliases of field methods.',
            entries={name: constant(alias) for name, alias in FIELD_METHOD_ALIASES.items()},
        ),
        StaticCategory(
            name='field_mixins',
            description='Mixins shared by panel fields.',
            entries={name: file(root / 'fields' / 'mixins' / f'{name}.py') for name in FIELD_MIXINS},
        ),
        StaticCategory(
            name='fields',
            description='Panel field definitions.',
            entries={name: file(root / 'fields' / f'{name}.py') for name in FIELDS},
        ),
        StaticCategory(
            name='kirbytag_aliases',
            description='Aliases of kirbytags.',
            entries={name: constant(alias) for name, alias in KIRBYTAG_ALIASES.items()},
        ),
        StaticCategory(
            name='section_mixins',
            description='Mixins shared by panel sections.',
            entries={name: file(root / 'sections' / 'mixins' / f'{name}.py') for name in SECTION_MIXINS},
        ),
        StaticCategory(
            name='sections',
            description='Panel section definitions.',
            entries={name: file(root / 'sections' / f'{name}.py') for name in SECTIONS},
        ),
        StaticCategory(
            name='snippets',
            description='Paths to core block snippets.',
            entries={f'blocks/{name}': constant(root / 'blocks' / name / f'{name}.html') for name in BLOCKS},
        ),
        StaticCategory(
            name='templates',
            description='Paths to system templates.',
            entries={name: constant(root / 'templates' / f'{name}.html') for name in TEMPLATES},
        ),
        UnitCategory(
            name='components',
            description='Core component functions.',
            path=root / 'components.py',
        ),
        UnitCategory(
            name='field_methods',
            description='Field method functions.',
            path=root / 'methods.py',
            with_host=True,
        ),
        UnitCategory(
            name='kirbytags',
            description='Kirbytag definitions.',
            path=root / 'tags.py',
        ),
        UnitCategory(
            name='routes',
            description='Router definitions, split into `before` and `after` routes.',
            path=root / 'routes.py',
            with_host=True,
        ),
    )
