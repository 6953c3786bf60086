"""
Field provider registry and the built-in providers.

A field provider is a callable taking the raw bytes handed to
StructuredWriter.write and returning a JSON-encodable value. A provider
signals failure by raising.
"""

import logging
import os
import sys
import time
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, Mapping, Tuple

from structwriter.errors import ConfigError, ReservedFieldError

logger = logging.getLogger(__name__)

MESSAGE_KEY = 'message'

FieldProvider = Callable[[bytes], Any]

_PACKAGE_DIR = os.path.dirname(os.path.normcase(os.path.abspath(__file__)))
_LOGGING_DIR = os.path.dirname(os.path.normcase(os.path.abspath(logging.__file__)))


class FieldRegistry:
    """
    Mapping of field name to provider.

    Mutable while a writer is being configured; frozen once construction
    returns.
    """

    def __init__(self):
        self._providers: Dict[str, FieldProvider] = {}
        self._frozen = False

    def register(self, name: str, provider: FieldProvider) -> None:
        """
        Bind provider to name, replacing any earlier binding.

        Raises:
            ReservedFieldError: If name is the reserved "message" key
            ConfigError: If name is empty, provider is not callable, or the
                registry is frozen
        """
        check_field_name(name)
        if not callable(provider):
            raise ConfigError(f"Provider for field {name!r} is not callable")
        if self._frozen:
            raise ConfigError(f"Cannot register field {name!r}: registry is frozen")

        if name in self._providers:
            logger.debug("Replacing provider for field %s", name)
        else:
            logger.debug("Registering provider for field %s", name)
        self._providers[name] = provider

    def freeze(self) -> None:
        """End setup; later register() calls raise ConfigError"""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        """Whether freeze() has been called"""
        return self._frozen

    def view(self) -> Mapping[str, FieldProvider]:
        """Read-only view of the registered providers"""
        return MappingProxyType(self._providers)

    def items(self) -> Iterator[Tuple[str, FieldProvider]]:
        return iter(self._providers.items())

    def __contains__(self, name) -> bool:
        return name in self._providers

    def __len__(self) -> int:
        return len(self._providers)


def check_field_name(name: str) -> None:
    """Validate a field name before it is registered"""
    if not isinstance(name, str) or not name:
        raise ConfigError(f"Field name must be a non-empty string, got {name!r}")
    if name == MESSAGE_KEY:
        raise ReservedFieldError(f"Field name {MESSAGE_KEY!r} is reserved for the log message")


def timestamp_provider(data: bytes) -> int:
    """Current wall-clock time in nanoseconds since the Unix epoch"""
    return time.time_ns()


def callsite_provider(data: bytes) -> str:
    """
    Location of the code that issued the write, as "<file>:<line>".

    Frames belonging to structwriter itself and to the stdlib logging
    package are skipped, so a write routed through logger.info() reports
    the line of the logger.info() call.
    """
    frame = sys._getframe(1)
    try:
        while frame is not None:
            filename = os.path.normcase(os.path.abspath(frame.f_code.co_filename))
            if os.path.dirname(filename) not in (_PACKAGE_DIR, _LOGGING_DIR):
                return f"{os.path.basename(frame.f_code.co_filename)}:{frame.f_lineno}"
            frame = frame.f_back
    finally:
        del frame

    return 'unknown:0'
