"""Tests for the host application and the core facade."""

from typing import TYPE_CHECKING

import pytest

from lazycore.app import App
from lazycore.catalog import derive
from lazycore.errors import ProducerFailure, UndefinedEntry
from lazycore.plugins import Plugin, PluginRegistry

if TYPE_CHECKING:
    from pathlib import Path

if TYPE_CHECKING:
    from lazycore.resolver import ResolvedView
    from lazycore.settings import CoreSettings


def test_urls(app: App) -> None:
    """Derive every system URL from the site URL."""
    assert app.urls() == {
        'index': 'https://example.com',
        'base': 'https://example.com',
        'current': 'https://example.com',
        'assets': 'https://example.com/assets',
        'api': 'https://example.com/api',
        'media': 'https://example.com/media',
        'panel': 'https://example.com/panel',
    }


def test_urls_with_trailing_slash_and_slugs(settings: 'CoreSettings') -> None:
    """Strip the trailing slash and honor configured slugs."""
    app = App(settings, path='/blog/article/', options={
        'url': 'https://example.com/',
        'api': {'slug': 'rest'},
        'panel.slug': 'admin',
    })

    assert app.url('index') == 'https://example.com/'
    assert app.url('base') == 'https://example.com'
    assert app.url('current') == 'https://example.com/blog/article'
    assert app.url('api') == 'https://example.com/rest'
    assert app.url('panel') == 'https://example.com/admin'


def test_urls_without_site_url(settings: 'CoreSettings') -> None:
    """Fall back to a relative site URL."""
    app = App(settings)

    assert app.url('index') == '/'
    assert app.url('base') == ''
    assert app.url('assets') == '/assets'


def test_undefined_url(app: App) -> None:
    """Fail on an unknown URL."""
    with pytest.raises(UndefinedEntry, match=r"^Entry 'doesNotExist' is not defined"):
        app.url('doesNotExist')


def test_roots(app: App, settings: 'CoreSettings') -> None:
    """Derive every root from the core and index roots."""
    kirby, index = settings.kirby_root, settings.index_root
    roots = app.roots()

    assert roots['kirby'] == kirby
    assert roots['i18n:translations'] == kirby / 'i18n' / 'translations'
    assert roots['panel'] == kirby / 'panel'
    assert roots['content'] == index / 'content'
    assert roots['config'] == index / 'site' / 'config'
    assert roots['license'] == index / 'site' / 'config' / '.license'
    assert roots['roles'] == index / 'site' / 'blueprints' / 'users'
    assert list(roots)[:2] == ['kirby', 'i18n']


def test_roots_are_cached(app: App) -> None:
    """Serve the same roots mapping on every request."""
    assert app.roots() is app.roots()
    assert app.core.roots() is app.core.load().roots()


def test_config_file_options(settings: 'CoreSettings') -> None:
    """Merge options from settings, the config file and arguments."""
    config = settings.index_root / 'site' / 'config'
    config.mkdir(parents=True)
    (config / 'config.yml').write_text(
        'url: https://config.example.com\napi:\n  slug: rest\ndebug: true\n',
        encoding='utf-8',
    )

    app = App(
        settings.model_copy(update={'options': {'debug': False, 'panel': {'slug': 'admin'}}}),
        options={'url': 'https://example.com'},
    )

    assert app.option('url') == 'https://example.com'
    assert app.option('api.slug') == 'rest'
    assert app.option('debug') is True
    assert app.option('panel.slug') == 'admin'
    assert app.option('missing', 'default') == 'default'


def test_invalid_config_file(settings: 'CoreSettings') -> None:
    """Fail on a site configuration that is not a mapping."""
    config = settings.index_root / 'site' / 'config'
    config.mkdir(parents=True)
    (config / 'config.yml').write_text('- url\n', encoding='utf-8')

    with pytest.raises(ProducerFailure, match=r'^Site configuration must be a mapping'):
        App(settings).option('url')


def test_definition_listings(app: App, settings: 'CoreSettings') -> None:
    """List definition files without loading them."""
    root = settings.get_definitions_root()

    assert app.core.areas()['site'] == root / 'areas' / 'site.py'
    assert app.core.blueprints()['blocks/code'] == root / 'blocks' / 'code' / 'code.yml'
    assert app.core.blueprints()['site'] == root / 'blueprints' / 'site.yml'
    assert app.core.blueprint_presets()['page'] == root / 'presets' / 'page.yml'
    assert app.core.fields()['text'] == root / 'fields' / 'text.py'
    assert app.core.field_mixins()['picker'] == root / 'fields' / 'mixins' / 'picker.py'
    assert app.core.sections()['pages'] == root / 'sections' / 'pages.py'
    assert app.core.section_mixins()['pagination'] == root / 'sections' / 'mixins' / 'pagination.py'


def test_definitions(app: App, definitions: 'Path') -> None:
    """Load single definitions on demand."""
    assert app.core.area('site') == {'label': 'Site', 'icon': 'home'}
    assert app.core.blueprint('site') == {'title': 'Site', 'sections': {'pages': {'type': 'pages'}}}
    assert app.core.field('text') == {'props': {'counter': True, 'maxlength': None}}

    with pytest.raises(ProducerFailure, match=r'^Definition file not found'):
        app.core.section('pages')


def test_units(app: App, definitions: 'Path') -> None:
    """Load units once, calling host-aware units with the app."""
    components = app.core.components()

    assert components['snippet'] == 'core-snippet'
    assert components['url']('blog') == '/blog'
    assert app.core.component('snippet') == 'core-snippet'

    assert app.core.kirbytags()['link'] == {'attr': ['text', 'title']}
    assert app.core.field_methods()['host'] == 'https://example.com'
    assert app.core.field_methods()['toUpper']('kt') == 'KT'
    assert app.core.routes()['before'] == [{'pattern': 'api'}]


def test_missing_unit(app: App) -> None:
    """Fail when a unit definition file does not exist."""
    with pytest.raises(ProducerFailure, match=r'^Definition file not found'):
        app.core.components()


def test_constants(app: App, settings: 'CoreSettings') -> None:
    """Serve alias tables, snippets and templates without loading files."""
    root = settings.get_definitions_root()

    assert app.core.field_method_aliases()['kt'] == 'kirbytext'
    assert app.core.kirbytag_aliases() == {'youtube': 'video', 'vimeo': 'video'}
    assert app.core.snippets()['blocks/text'] == root / 'blocks' / 'text' / 'text.html'
    assert app.core.templates()['emails/auth/login'] == root / 'templates' / 'emails' / 'auth' / 'login.html'
    assert app.core.auth_challenges() == {}
    assert app.core.cache_types() == {}


def test_invalidate(app: App, definitions: 'Path') -> None:
    """Reload a definition after invalidating its category."""
    assert app.core.area('site')['label'] == 'Site'

    (definitions / 'areas' / 'site.py').write_text("exports = {'label': 'Home'}\n", encoding='utf-8')
    assert app.core.area('site')['label'] == 'Site'

    app.core.invalidate('areas')
    assert app.core.area('site')['label'] == 'Home'


def test_roots_override_reading_options(settings: 'CoreSettings') -> None:
    """Let a roots override read options from the site configuration."""
    config = settings.index_root / 'site' / 'config'
    config.mkdir(parents=True)
    (config / 'config.yml').write_text('media:\n  dir: files\n', encoding='utf-8')

    calls = []

    def media(roots: 'ResolvedView') -> 'Path':
        calls.append(1)
        return roots['index'] / roots.host.option('media.dir', 'media')

    plugins = PluginRegistry(strict=True)
    plugins.add_plugin(Plugin(name='media', entries={'roots': {'media': derive(media)}}))

    app = App(settings, plugins=plugins)

    assert app.root('media') == settings.index_root / 'files'
    assert app.core.load().root('media') == settings.index_root / 'media'
    assert app.roots()['media'] == settings.index_root / 'files'
    assert len(calls) == 1


def test_area_ignores_plugins(settings: 'CoreSettings', definitions: 'Path') -> None:
    """Return the core area definition even when a plugin extends it."""
    plugins = PluginRegistry(strict=True)
    plugins.add_plugin(Plugin(name='custom', entries={
        'areas': {'site': derive(lambda areas: {**areas['site'], 'icon': 'globe'})},
    }))

    app = App(settings, plugins=plugins)

    assert app.core.area('site') == {'label': 'Site', 'icon': 'home'}
    assert app.core.load().area('site') == {'label': 'Site', 'icon': 'home'}
    assert app.core.get('areas', 'site') == {'label': 'Site', 'icon': 'globe'}
