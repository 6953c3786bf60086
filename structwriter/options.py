"""
Construction-time options for StructuredWriter.

An option is a callable applied to the FieldRegistry of the writer being
built. Options are applied in the order they are passed to new().
"""

from typing import Callable, Dict

from structwriter.errors import ConfigError
from structwriter.fields import (
    FieldProvider,
    FieldRegistry,
    callsite_provider,
    check_field_name,
    timestamp_provider,
)

Option = Callable[[FieldRegistry], None]


def with_field_func(name: str, func: FieldProvider) -> Option:
    """
    Add a field called name whose value is func(data) for every write.

    func receives the raw bytes given to write(), before any trimming or
    JSON parsing. If func raises, the write raises the same exception and
    nothing reaches the sink.

    Raises:
        ReservedFieldError: If name is "message"
        ConfigError: If name is empty or func is not callable

    Example:
        counter = itertools.count()
        writer = new(sink, with_field_func('seq', lambda data: next(counter)))
    """
    check_field_name(name)
    if not callable(func):
        raise ConfigError(f"Provider for field {name!r} is not callable")

    def configure(registry: FieldRegistry) -> None:
        registry.register(name, func)

    return configure


def with_timestamp() -> Option:
    """Add a "timestamp" field holding nanoseconds since the epoch"""
    return with_field_func('timestamp', timestamp_provider)


def with_callsite() -> Option:
    """Add a "callsite" field holding "<file>:<line>" of the write call"""
    return with_field_func('callsite', callsite_provider)


BUILTIN_OPTIONS: Dict[str, Callable[[], Option]] = {
    'timestamp': with_timestamp,
    'callsite': with_callsite,
}


def option_from_name(name: str) -> Option:
    """
    Look up a built-in option by field name.

    Raises:
        ConfigError: If name is not a built-in field
    """
    factory = BUILTIN_OPTIONS.get(name)
    if factory is None:
        raise ConfigError(f"Unknown field: {name}. Must be one of {sorted(BUILTIN_OPTIONS)}")
    return factory()
