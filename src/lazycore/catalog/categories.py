"""Category declarations.

A category is a named collection of entries sharing one resolution pass
and one cache. The kind of a category selects the resolution strategy:

- `ordered` categories are resolved as a whole, in declaration order,
  because their entries reference each other (roots, urls);
- `static` categories hold independent entries resolved one by one
  (definition file catalogs, aliases, factory registries);
- `unit` categories load one expensive definition file and cache its
  return value verbatim (components, routes, tags, field methods).
"""

from collections import Counter
from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING, Annotated, Any, Literal

from pydantic import Field, field_validator, model_validator

from lazycore.errors import CatalogError, UndefinedEntry
from lazycore.models import SchemaModel
from lazycore.names import CategoryName, EntryName  # noqa: TC001

from .producers import Producer, ensure_producer

if TYPE_CHECKING:
    from typing import Self


class BaseCategory(SchemaModel):
    """Base declaration shared by all category kinds."""

    name: CategoryName = Field(
        title='Category name',
        description='Name under which the category is registered in a catalog.',
    )

    description: str | None = Field(
        default=None,
        title='Description',
        description='Human-readable description of the category.',
    )


class EntriesMixin(SchemaModel):
    """Mixin declaring an ordered mapping of named producers."""

    entries: dict[EntryName, Producer] = Field(
        default_factory=dict,
        title='Entries',
        description=(
            'Mapping of entry names to producers. '
            'Declaration order is preserved and, for ordered categories, '
            'is the dependency order.'
        ),
    )

    @field_validator('entries', mode='before')
    @classmethod
    def wrap_plain_values(cls, value: Any) -> Any:  # noqa: ANN401
        """Wrap plain values into constant producers."""
        if not isinstance(value, dict):
            return value

        return {
            name: ensure_producer(item)
            for name, item in value.items()
        }


class OrderedCategory(EntriesMixin, BaseCategory):
    """Category resolved as a whole in a single ordered pass.

    Every derivation may only reference entries declared earlier in the
    same category. The resolved mapping is cached atomically.
    """

    kind: Literal['ordered'] = 'ordered'


class StaticCategory(EntriesMixin, BaseCategory):
    """Category of independent entries resolved and cached one by one."""

    kind: Literal['static'] = 'static'


class UnitCategory(BaseCategory):
    """Category backed by a single definition file.

    The file is loaded once and its value cached verbatim. When
    `with_host` is set, the loaded value must be a callable accepting
    the host and its return value is cached instead.
    """

    kind: Literal['unit'] = 'unit'

    path: Path = Field(
        title='Definition file',
        description='Absolute path of the unit definition file.',
    )

    with_host: bool = Field(
        default=False,
        title='Host-aware unit',
        description='Whether the loaded value is a callable taking the host.',
    )


#: Any category, discriminated by its kind.
Category = Annotated[
    OrderedCategory | StaticCategory | UnitCategory,
    Field(discriminator='kind'),
]


class Catalog(SchemaModel):
    """Static registry of categories.

    The catalog performs no resolution. It only declares which
    categories exist and how their entries are produced.
    """

    categories: dict[CategoryName, Category] = Field(
        default_factory=dict,
        title='Categories',
        description='Mapping of category names to category declarations.',
    )

    @model_validator(mode='after')
    def check_names(self) -> 'Self':
        """Ensure every category is registered under its own name."""
        for key, category in self.categories.items():
            if key != category.name:
                raise ValueError(
                    f'Category {category.name!r} is registered as {key!r}',
                )

        return self

    @classmethod
    def from_categories(cls, *categories: OrderedCategory | StaticCategory | UnitCategory) -> 'Self':
        """Build a catalog from category declarations.

        Args:
            *categories: Category declarations with unique names.

        Returns:
            A catalog containing all the given categories.

        Raises:
            CatalogError: If two categories share a name.
        """
        counts = Counter(category.name for category in categories)
        if duplicates := [name for name, count in counts.items() if count > 1]:
            raise CatalogError.from_names('Duplicate categories', duplicates)

        return cls(categories={
            category.name: category
            for category in categories
        })

    def category(self, name: str) -> OrderedCategory | StaticCategory | UnitCategory:
        """Return a category declaration by name.

        Raises:
            UndefinedEntry: If the category is not declared.
        """
        try:
            return self.categories[name]
        except KeyError:
            raise UndefinedEntry.for_category(name) from None

    def names(self) -> tuple[str, ...]:
        """Return declared category names in declaration order."""
        return tuple(self.categories)
