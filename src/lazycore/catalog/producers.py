"""Producer descriptors for catalog entries.

A producer describes how the value of one entry is computed. Producers
are declarative: they hold a constant, a definition file path, or a
derivation callable, and the resolver decides when to invoke them.

Three kinds are supported:
- `Constant` returns its value verbatim;
- `File` is loaded by the external loader;
- `Derived` computes its value from entries already resolved in the
  same category.
"""

from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import Field

from lazycore.models import SchemaModel
from lazycore.values import Derivation  # noqa: TC001


class Constant(SchemaModel):
    """Producer returning a fixed value."""

    kind: Literal['constant'] = 'constant'

    value: Any = Field(
        title='Value',
        description='Value returned verbatim on resolution.',
    )


class File(SchemaModel):
    """Producer loading a definition file through the loader."""

    kind: Literal['file'] = 'file'

    path: Path = Field(
        title='Definition file',
        description=(
            'Absolute path of the definition file. '
            'The file is loaded on first access only.'
        ),
    )


class Derived(SchemaModel):
    """Producer computing its value from resolved sibling entries."""

    kind: Literal['derived'] = 'derived'

    derive: Derivation = Field(
        title='Derivation function',
        description=(
            'Callable receiving a read-only view of the entries already '
            'resolved in the same category and returning the entry value.'
        ),
    )


#: Any producer, discriminated by its kind.
Producer = Annotated[Constant | File | Derived, Field(discriminator='kind')]

PRODUCERS = (Constant, File, Derived)


def constant(value: Any) -> Constant:  # noqa: ANN401
    """Declare a constant producer."""
    return Constant(value=value)


def file(path: Path | str) -> File:
    """Declare a file producer."""
    return File(path=Path(path))


def derive(func: Derivation) -> Derived:
    """Declare a derived producer."""
    return Derived(derive=func)


def ensure_producer(value: Any) -> Constant | File | Derived:  # noqa: ANN401
    """Wrap a plain value into a constant producer.

    Producers are returned unchanged. Callables are wrapped as constants
    too, since a catalog may legitimately store functions as values; use
    `derive` to declare a derivation.

    Args:
        value: A producer or a plain value.

    Returns:
        A producer instance.
    """
    if isinstance(value, PRODUCERS):
        return value

    return Constant(value=value)
