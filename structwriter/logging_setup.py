"""
Routing stdlib logging output through a StructuredWriter.
"""

import json
import logging
from typing import Iterable

from structwriter.writer import StructuredWriter

MESSAGE_FORMAT = '%(message)s'


class TextStream:
    """
    Text stream adapter for a StructuredWriter.

    logging.StreamHandler emits each record as a single write(msg + "\\n")
    call, so every call here carries exactly one message.
    """

    def __init__(self, writer: StructuredWriter):
        self.writer = writer

    def write(self, text: str) -> int:
        self.writer.write(text.encode('utf-8'))
        return len(text)

    def flush(self) -> None:
        self.writer.flush()


def _handler_for(writer: StructuredWriter, level: int) -> logging.Handler:
    handler = logging.StreamHandler(TextStream(writer))
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(MESSAGE_FORMAT))
    return handler


def _writes_to(handler: logging.Handler, writer: StructuredWriter) -> bool:
    stream = getattr(handler, 'stream', None)
    return isinstance(stream, TextStream) and stream.writer is writer


def get_logger(
    name: str,
    writer: StructuredWriter,
    level: int = logging.INFO
) -> logging.Logger:
    """
    Get a logger whose records are written through writer.

    Args:
        name: Logger name (typically __name__)
        writer: Destination StructuredWriter
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance

    Example:
        writer = new(sys.stdout, with_timestamp())
        logger = get_logger(__name__, writer)
        logger.info("User logged in")
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Check if we already have a handler for this writer to avoid duplicates
    if not any(_writes_to(h, writer) for h in logger.handlers):
        logger.addHandler(_handler_for(writer, level))

    return logger


def redirect_logging(writer: StructuredWriter, level: int = logging.INFO) -> logging.Logger:
    """
    Send all root logger output through writer.

    Existing root handlers are removed. Nothing calls this implicitly;
    redirecting process-wide logging is the application's decision.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    root.setLevel(level)
    root.addHandler(_handler_for(writer, level))
    return root


def validate_record(line: str, required: Iterable[str] = ('message',)) -> bool:
    """
    Validate that a line is a JSON object carrying the required keys.

    Args:
        line: Output line to validate
        required: Keys that must be present

    Returns:
        True if valid, False otherwise
    """
    try:
        data = json.loads(line)
    except (json.JSONDecodeError, TypeError):
        return False

    if not isinstance(data, dict):
        return False

    return all(field in data for field in required)
