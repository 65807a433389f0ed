"""Tests for ordered whole-category resolution."""

from types import MappingProxyType
from typing import TYPE_CHECKING

import pytest

from lazycore.catalog import Catalog, OrderedCategory, constant, derive
from lazycore.errors import UnresolvedReference
from lazycore.resolver import ResolvedView, Resolver, resolve_ordered

if TYPE_CHECKING:
    from lazycore.catalog import Producer


def produce(producer: 'Producer', view: ResolvedView) -> object:
    """Invoke constants and derivations only."""
    if producer.kind == 'constant':
        return producer.value

    return producer.derive(view)


class Host:
    """Minimal host context."""

    def __init__(self, options: dict[str, object], path: str = '') -> None:
        self.options = options
        self.request_path = path

    def option(self, key: str, default: object = None) -> object:
        return self.options.get(key, default)

    def path(self) -> str:
        return self.request_path


def test_derivation_sees_earlier_entries() -> None:
    """Resolve entries in declaration order with access to earlier ones."""
    entries = {
        'index': constant('https://example.com/'),
        'base': derive(lambda urls: urls['index'].rstrip('/')),
        'assets': derive(lambda urls: f'{urls["base"]}/assets'),
    }

    resolved = resolve_ordered('urls', entries, produce)

    assert isinstance(resolved, MappingProxyType)
    assert list(resolved) == ['index', 'base', 'assets']
    assert resolved['assets'] == 'https://example.com/assets'


def test_forward_reference_fails() -> None:
    """Fail on a reference to an entry declared later."""
    entries = {
        'index': constant('https://example.com'),
        'assets': derive(lambda urls: f'{urls["base"]}/assets'),
        'base': derive(lambda urls: urls['index']),
    }

    with pytest.raises(UnresolvedReference, match=r"^Reference to unresolved entry 'base'") as error:
        resolve_ordered('urls', entries, produce)

    assert isinstance(error.value, KeyError)
    assert error.value.context['category'] == 'urls'
    assert error.value.context['resolved'] == {'index': 'https://example.com'}
    assert 'in category "urls", entry "base"' in str(error.value)


def test_misspelled_reference_fails() -> None:
    """Fail on a reference to a name that does not exist."""
    entries = {
        'index': constant('/'),
        'base': derive(lambda urls: urls['idnex']),
    }

    with pytest.raises(UnresolvedReference, match=r"^Reference to unresolved entry 'idnex'"):
        resolve_ordered('urls', entries, produce)


def test_optional_reference_with_default() -> None:
    """Allow derivations to probe optional siblings."""
    entries = {
        'index': constant('/'),
        'api': derive(lambda urls: urls.get('custom', 'api')),
        'known': derive(lambda urls: 'index' in urls and 'missing' not in urls),
    }

    resolved = resolve_ordered('urls', entries, produce)

    assert resolved['api'] == 'api'
    assert resolved['known'] is True


def test_view_without_host() -> None:
    """Fail when a derivation asks for a host that was not provided."""
    entries = {'index': derive(lambda urls: urls.host.option('url'))}

    with pytest.raises(RuntimeError, match=r"^No host available while resolving 'urls'$"):
        resolve_ordered('urls', entries, produce)


def test_view_with_host() -> None:
    """Expose the host to derivations."""
    entries = {
        'index': derive(lambda urls: urls.host.option('url', '/')),
        'current': derive(lambda urls: f'{urls["index"]}/{urls.host.path()}'),
    }

    resolved = resolve_ordered('urls', entries, produce, Host({'url': 'https://example.com'}, 'blog'))

    assert resolved['current'] == 'https://example.com/blog'


def test_failed_category_is_retried() -> None:
    """Cache nothing when an ordered category fails and retry on next access."""
    attempts = []

    def flaky(urls: ResolvedView) -> str:
        attempts.append(1)
        if len(attempts) == 1:
            raise RuntimeError('not yet')
        return f'{urls["index"]}/media'

    catalog = Catalog.from_categories(OrderedCategory(
        name='urls',
        entries={
            'index': 'https://example.com',
            'media': derive(flaky),
        },
    ))
    resolver = Resolver(catalog)

    with pytest.raises(RuntimeError, match=r'^not yet$'):
        resolver.get('urls', 'index')

    assert len(resolver.cache) == 0
    assert resolver.get('urls', 'media') == 'https://example.com/media'
    assert resolver.get_category('urls') == {
        'index': 'https://example.com',
        'media': 'https://example.com/media',
    }
    assert len(attempts) == 2


def test_category_is_resolved_once() -> None:
    """Share one resolution pass between all entries of a category."""
    calls = []

    def index(roots: ResolvedView) -> str:
        calls.append(1)
        return '/var/www'

    catalog = Catalog.from_categories(OrderedCategory(
        name='roots',
        entries={
            'index': derive(index),
            'content': derive(lambda roots: f'{roots["index"]}/content'),
        },
    ))
    resolver = Resolver(catalog)

    assert resolver.get('roots', 'content') == '/var/www/content'
    assert resolver.get('roots', 'index') == '/var/www'
    assert resolver.get_category('roots') is resolver.get_category('roots')
    assert len(calls) == 1
