"""Definition file loading.

A loader turns a definition file into a value. The resolver only knows
the `Loader` protocol; `FileLoader` is the default implementation and
dispatches on the file suffix:

- `.yml` and `.yaml` files are parsed with PyYAML's safe loader;
- `.json` files are parsed with the standard JSON decoder;
- `.py` files are executed and their `exports` global is returned.

Every loading issue is reported as `ProducerFailure` chained to the
original exception.
"""

from json import JSONDecodeError, loads
from runpy import run_path
from typing import TYPE_CHECKING, Protocol

from yaml import YAMLError, safe_load

from lazycore.errors import ProducerFailure

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

if TYPE_CHECKING:
    from lazycore.values import Value

#: Global holding the value of a Python definition file.
EXPORTS = 'exports'


class Loader(Protocol):
    """Protocol for definition file loaders."""

    def load(self, path: 'Path') -> 'Value':
        """Load a definition file and return its value.

        Args:
            path: Absolute path of the definition file.
        """
        ...  # pragma: no cover


class FileLoader:
    """Loader for YAML, JSON and Python definition files."""

    def __init__(self, exports: str = EXPORTS) -> None:
        """Initialize the loader.

        Args:
            exports: Name of the global holding the value of Python files.
        """
        self.exports = exports
        self.readers: dict[str, Callable[[Path], Value]] = {
            '.yml': self.read_yaml,
            '.yaml': self.read_yaml,
            '.json': self.read_json,
            '.py': self.read_python,
        }

    def load(self, path: 'Path') -> 'Value':
        """Load a definition file and return its value.

        Args:
            path: Absolute path of the definition file.

        Returns:
            The value produced by the definition file.

        Raises:
            ProducerFailure: If the file is missing, has an unsupported
                type, is malformed or fails during execution.
        """
        reader = self.readers.get(path.suffix.lower())
        if reader is None:
            raise ProducerFailure('Unsupported definition file type', path=path)

        if not path.is_file():
            raise ProducerFailure('Definition file not found', path=path)

        try:
            return reader(path)

        except ProducerFailure:
            raise

        except YAMLError as base:
            raise ProducerFailure('Invalid YAML definition', path=path) from base

        except JSONDecodeError as base:
            raise ProducerFailure('Invalid JSON definition', path=path) from base

        except Exception as base:
            raise ProducerFailure('Failed to load definition', path=path) from base

    @staticmethod
    def read_yaml(path: 'Path') -> 'Value':
        """Parse a YAML definition file."""
        with path.open('rt', encoding='utf-8') as content:
            return safe_load(content)

    @staticmethod
    def read_json(path: 'Path') -> 'Value':
        """Parse a JSON definition file."""
        return loads(path.read_text(encoding='utf-8'))

    def read_python(self, path: 'Path') -> 'Value':
        """Execute a Python definition file and return its exports.

        Raises:
            ProducerFailure: If the file does not define the exports global.
        """
        namespace = run_path(str(path))
        if self.exports not in namespace:
            raise ProducerFailure(f'Definition does not define {self.exports!r}', path=path)

        return namespace[self.exports]
