"""CLI utilities for inspecting resolved catalogs.

Values are resolved exactly as the host would resolve them, plugins
included unless `--core` is given, and printed as YAML.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Any

from click import ClickException, argument, echo, group, option, pass_context, pass_obj
from click import Path as PathParam
from yaml import safe_dump

from lazycore.app import App
from lazycore.errors import CoreError
from lazycore.settings import CoreSettings
from lazycore.values import plain

if TYPE_CHECKING:
    from click import Context

    from lazycore.core import Core

DirectoryPath = PathParam(
    file_okay=False,
    path_type=Path,
)


def _dump(value: Any) -> None:  # noqa: ANN401
    """Print a resolved value as YAML, or verbatim for scalars."""
    data = plain(value)
    if isinstance(data, (dict, list)):
        echo(safe_dump(data, sort_keys=False, allow_unicode=True), nl=False)
    else:
        echo('null' if data is None else data)


def _select(app: App, core: bool) -> 'Core':
    """Select the plugin-aware or the core-only view."""
    if core:
        return app.core.load()

    return app.core


@group(help='Command-line utilities for inspecting lazycore catalogs.')
@option('--url', default=None, help='Site URL, overrides the `url` option.')
@option('--path', 'request_path', default='', help='Current request path.')
@option('--index-root', type=DirectoryPath, default=None, help='Root directory of the site.')
@option('--kirby-root', type=DirectoryPath, default=None, help='Root directory of the core.')
@option(
    '--relaxed',
    is_flag=True,
    default=False,
    help='Report plugin loading issues as warnings instead of errors.',
)
@option('--no-plugins', is_flag=True, default=False, help='Do not load plugins.')
@pass_context
def cli(ctx: 'Context', url: str | None, request_path: str,  # noqa: PLR0913
        index_root: Path | None, kirby_root: Path | None,
        relaxed: bool, no_plugins: bool) -> None:
    """Root CLI group building the application."""
    values: dict[str, Any] = {}
    if index_root is not None:
        values['index_root'] = index_root
    if kirby_root is not None:
        values['kirby_root'] = kirby_root
    if relaxed:
        values['strict'] = False
    if no_plugins:
        values['plugins'] = False

    try:
        ctx.obj = App(
            CoreSettings(**values),
            path=request_path,
            options={'url': url} if url else None,
        )
    except CoreError as error:
        raise ClickException(str(error)) from error


@cli.command(name='categories', help='List declared categories and their kinds.')
@pass_obj
def list_categories(app: App) -> None:
    """Print category names and kinds."""
    for name, category in app.catalog.categories.items():
        echo(f'{name}\t{category.kind}')


@cli.command(name='show', help='Print a whole resolved category.')
@option('--core', is_flag=True, default=False, help='Ignore plugin overrides.')
@argument('category')
@pass_obj
def show_category(app: App, category: str, core: bool) -> None:
    """Resolve and print a category."""
    try:
        _dump(_select(app, core).category(category))
    except CoreError as error:
        raise ClickException(str(error)) from error


@cli.command(name='get', help='Print one resolved entry.')
@option('--core', is_flag=True, default=False, help='Ignore plugin overrides.')
@argument('category')
@argument('name')
@pass_obj
def get_entry(app: App, category: str, name: str, core: bool) -> None:
    """Resolve and print one entry."""
    try:
        _dump(_select(app, core).get(category, name))
    except CoreError as error:
        raise ClickException(str(error)) from error


if __name__ == '__main__':
    cli()
