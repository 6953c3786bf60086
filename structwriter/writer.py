"""
StructuredWriter: wraps each write in a JSON object.
"""

import io
import json
import logging
from typing import Any, Iterable, Mapping, Union

from structwriter.errors import SerializationError
from structwriter.fields import MESSAGE_KEY, FieldProvider, FieldRegistry
from structwriter.options import Option, option_from_name

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview, str]


class StructuredWriter:
    """
    File-like object that writes one JSON line per write() to a sink.

    Output format:
    {"message": "some log msg", "timestamp": 1700000000000000000}

    The message is the decoded JSON object when the written data is a JSON
    object, otherwise the written text with surrounding whitespace removed.
    Every registered field adds one key.

    The writer holds no lock. If the sink is not safe for concurrent
    writes, callers must serialize access to the writer themselves.
    """

    def __init__(self, sink, *options: Option):
        self._sink = sink
        self._text_sink = isinstance(sink, io.TextIOBase)
        self._fields = FieldRegistry()

        for option in options:
            option(self._fields)

        self._fields.freeze()
        logger.debug("StructuredWriter created with fields: %s", list(self._fields.view()))

    @classmethod
    def from_field_names(cls, sink, names: Iterable[str]) -> 'StructuredWriter':
        """
        Build a writer from built-in field names, e.g. ['timestamp', 'callsite'].

        Raises:
            ConfigError: If a name is not a built-in field
        """
        return cls(sink, *(option_from_name(name) for name in names))

    @property
    def sink(self):
        return self._sink

    @property
    def fields(self) -> Mapping[str, FieldProvider]:
        """Read-only view of the registered field providers"""
        return self._fields.view()

    def write(self, data: BytesLike) -> int:
        """
        Wrap data in a JSON record and write it to the sink.

        Args:
            data: One log message. str is UTF-8 encoded first.

        Returns:
            Whatever the sink's write() returned

        Raises:
            SerializationError: If the record cannot be encoded as JSON
            Any exception raised by a field provider or by the sink
        """
        if isinstance(data, str):
            data = data.encode('utf-8')
        elif isinstance(data, (bytearray, memoryview)):
            data = bytes(data)
        elif not isinstance(data, bytes):
            raise TypeError(f"write() argument must be bytes or str, not {type(data).__name__}")

        record = {MESSAGE_KEY: parse_message(data)}
        for name, provider in self._fields.items():
            record[name] = provider(data)

        payload = encode_record(record)

        if self._text_sink:
            return self._sink.write(payload.decode('utf-8'))
        return self._sink.write(payload)

    def flush(self) -> None:
        flush = getattr(self._sink, 'flush', None)
        if flush is not None:
            flush()

    def writable(self) -> bool:
        return True


def parse_message(data: bytes) -> Any:
    """
    Decode data as a JSON object, falling back to trimmed text.

    Only a JSON object counts as structured; arrays, scalars and invalid
    JSON are all kept as text. Input must be UTF-8 to count as JSON.
    """
    try:
        parsed = json.loads(data.decode('utf-8'))
    except (ValueError, RecursionError):
        parsed = None

    if isinstance(parsed, dict):
        return parsed

    return data.decode('utf-8', errors='replace').strip()


def encode_record(record: Mapping[str, Any]) -> bytes:
    """Serialize a record as a single compact JSON line"""
    try:
        text = json.dumps(record, separators=(',', ':'), allow_nan=False)
    except (TypeError, ValueError, RecursionError) as e:
        raise SerializationError(f"Cannot encode log record: {e}") from e

    return (text + '\n').encode('utf-8')


def new(sink, *options: Option) -> StructuredWriter:
    """
    Create a StructuredWriter writing to sink.

    Args:
        sink: Object with a write() method; binary streams receive bytes,
            io.TextIOBase streams (sys.stdout) receive str
        *options: Field options, applied in order; a later option for the
            same field name replaces an earlier one

    Example:
        writer = new(sys.stdout, with_timestamp(), with_callsite())
        writer.write(b"some log msg\\n")
    """
    return StructuredWriter(sink, *options)
