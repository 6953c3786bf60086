"""
Exceptions raised by structwriter.
"""


class StructuredWriterError(Exception):
    """Base class for structwriter errors"""
    pass


class ConfigError(StructuredWriterError):
    """Invalid writer construction or field registration"""
    pass


class ReservedFieldError(ConfigError):
    """A field provider tried to claim the reserved "message" key"""
    pass


class SerializationError(StructuredWriterError):
    """The assembled record could not be encoded as JSON"""
    pass
