"""Catalog names primitive types and validation rules.

This module defines base name patterns and strongly-typed aliases used by
the catalog and the resolver to validate category and entry identifiers.

Category names are plain identifiers (`roots`, `field_methods`). Entry
names are more permissive because catalogs key values by namespaced or
path-like names (`i18n:translations`, `blocks/code`,
`emails/auth/password-reset`).
"""

from re import ASCII
from re import compile as regexp
from typing import Annotated

from pydantic import Field

#: Base pattern for category and plugin identifiers.
_NAME_PATTERN = r'[a-zA-Z]\w*'

#: Base pattern for entry identifiers.
#: Letters first, then letters, digits, underscores, dots, colons, slashes or dashes.
_ENTRY_PATTERN = r'[a-zA-Z][\w.:/-]*'

#: Compiled pattern for category identifiers.
CATEGORY_PATTERN = regexp(rf'^{_NAME_PATTERN}$', flags=ASCII)


CategoryName = Annotated[
    str, Field(
        pattern=rf'^{_NAME_PATTERN}$',
        title='Category identifier',
        description=(
            'Name of a category of entries sharing one resolution pass '
            'and one cache. Limited to ASCII letters, digits and underscores.'
        ),
        examples=[
            'roots',
            'field_methods',
        ],
    ),
]

EntryName = Annotated[
    str, Field(
        pattern=rf'^{_ENTRY_PATTERN}$',
        title='Entry identifier',
        description=(
            'Name of an entry, unique within its category. '
            'Entry names may be namespaced with colons or path-like '
            'with slashes.'
        ),
        examples=[
            'index',
            'i18n:translations',
            'blocks/code',
        ],
    ),
]

PluginName = Annotated[
    str, Field(
        pattern=rf'^{_NAME_PATTERN}$',
        title='Plugin identifier',
        description='Logical namespace of a plugin, used for diagnostics.',
        examples=[
            'example',
        ],
    ),
]
