"""Tests configurations and fixtures."""

from importlib.metadata import EntryPoint, EntryPoints
from textwrap import dedent
from typing import TYPE_CHECKING

import pytest

from lazycore.app import App
from lazycore.settings import CoreSettings

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

if TYPE_CHECKING:
    from pytest_mock import MockerFixture, MockType

if TYPE_CHECKING:
    from lazycore.plugins import Plugin

#: Definition files written into the definitions root by `definitions`.
DEFINITIONS = {
    'components.py': '''
        def url(path):
            return f'/{path}'

        exports = {'url': url, 'snippet': 'core-snippet'}
    ''',
    'methods.py': '''
        def methods(host):
            return {'toUpper': str.upper, 'host': host.option('url')}

        exports = methods
    ''',
    'routes.py': '''
        def routes(host):
            return {'before': [{'pattern': 'api'}], 'after': [{'pattern': '(:all)'}]}

        exports = routes
    ''',
    'tags.py': '''
        exports = {'link': {'attr': ['text', 'title']}, 'video': {'attr': ['width']}}
    ''',
    'fields/text.py': '''
        exports = {'props': {'counter': True, 'maxlength': None}}
    ''',
    'areas/site.py': '''
        exports = {'label': 'Site', 'icon': 'home'}
    ''',
    'blueprints/site.yml': '''
        title: Site
        sections:
          pages:
            type: pages
    ''',
    'presets/page.yml': '''
        columns:
          - width: 2/3
    ''',
}


@pytest.fixture
def settings(tmp_path: 'Path') -> CoreSettings:
    """Provide settings rooted in a temporary directory.

    Plugins are not discovered from entry points unless a test enables
    them explicitly.
    """
    return CoreSettings(
        kirby_root=tmp_path / 'kirby',
        index_root=tmp_path / 'site',
        plugins=False,
    )


@pytest.fixture
def definitions(settings: CoreSettings) -> 'Path':
    """Write sample definition files and return the definitions root."""
    root = settings.get_definitions_root()
    for name, content in DEFINITIONS.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(content).lstrip(), encoding='utf-8')

    return root


@pytest.fixture
def app(settings: CoreSettings) -> App:
    """Provide an application serving `https://example.com`."""
    return App(settings, options={'url': 'https://example.com'})


@pytest.fixture
def patch_entrypoints(mocker: 'MockerFixture') -> 'Callable[..., MockType]':
    """Provide a factory for mocking `importlib.metadata.entry_points`.

    Returns a callable that patches `entry_points()` to simulate
    discovery of plugins in the `lazycore_plugins` entry point group.

    The returned factory allows configuring:
    - successfully loadable plugins,
    - or an exception raised during plugin loading,
    - or an empty entry point list.
    """
    def patch(*plugins: 'Plugin', raises: Exception | None = None) -> 'MockType':
        """Patch `entry_points` with a controlled plugin configuration.

        Args:
            plugins: Plugin objects to be returned by `EntryPoint.load()`.
                If empty, no entry points are registered.
            raises: Exception to raise when `EntryPoint.load()` is called.
                Used to simulate plugin load failures.

        Returns:
            A mock patch object produced by `mocker.patch` that replaces
            `importlib.metadata.entry_points` for the duration of the test.
        """
        entrypoints = []
        for index, plugin in enumerate(plugins):
            ep = mocker.Mock(spec=EntryPoint)
            ep.group = 'lazycore_plugins'
            ep.name = f'tests{index}'
            ep.value = f'tests.examples.plugins:plugin{index}'
            ep.load.return_value = plugin
            if raises is not None:
                ep.load.side_effect = raises
            entrypoints.append(ep)

        return mocker.patch(
            'importlib.metadata.entry_points',
            return_value=EntryPoints(entrypoints),
        )

    return patch
