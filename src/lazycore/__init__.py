"""Lazy, memoized loader for the core definitions of a CMS.

The `lazycore` package declares everything the core needs at runtime
(directory roots, public URLs, components, routes, kirbytags, field
methods, panel areas, blueprints, fields, sections, snippets and
templates) as a static catalog, and resolves each part only when it is
first requested.

Key features:
- declarative catalogs of constants, definition files and derivations;
- ordered categories whose entries derive from earlier siblings;
- one cache per application run, with plugin-aware and core-only paths;
- plugin overrides discovered via entry points.

The primary entry points are `lazycore.app.App` and its `core` facade.
"""
