"""Static catalogs of named entries.

This package declares categories of entries and the producers computing
their values. Declarations are immutable Pydantic models; they perform
no I/O and no computation themselves.

The primary entry points are `Catalog`, the three category kinds and
the producer helpers `constant`, `file` and `derive`.
"""

from .categories import BaseCategory, Catalog, Category, OrderedCategory, StaticCategory, UnitCategory
from .defaults import core_catalog
from .producers import Constant, Derived, File, Producer, constant, derive, ensure_producer, file

__all__ = (
    'BaseCategory',
    'Catalog',
    'Category',
    'Constant',
    'Derived',
    'File',
    'OrderedCategory',
    'Producer',
    'StaticCategory',
    'UnitCategory',
    'constant',
    'core_catalog',
    'derive',
    'ensure_producer',
    'file',
)
