"""
structwriter: JSON-wrapping writer for plain-text logging

Wraps each write in a JSON object with a "message" key plus optional
computed fields (timestamp, call site, custom fields) and forwards the
serialized line to an underlying sink.
"""

from structwriter.errors import (
    ConfigError,
    ReservedFieldError,
    SerializationError,
    StructuredWriterError,
)
from structwriter.fields import FieldRegistry, callsite_provider, timestamp_provider
from structwriter.logging_setup import TextStream, get_logger, redirect_logging, validate_record
from structwriter.options import option_from_name, with_callsite, with_field_func, with_timestamp
from structwriter.writer import StructuredWriter, new

__all__ = [
    'ConfigError',
    'FieldRegistry',
    'ReservedFieldError',
    'SerializationError',
    'StructuredWriter',
    'StructuredWriterError',
    'TextStream',
    'callsite_provider',
    'get_logger',
    'new',
    'option_from_name',
    'redirect_logging',
    'timestamp_provider',
    'validate_record',
    'with_callsite',
    'with_field_func',
    'with_timestamp',
]
__version__ = '1.0.0'
