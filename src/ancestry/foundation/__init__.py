"""Foundation - errors and logging shared by every other ancestry module."""

from ancestry.foundation.errors import (
    ERROR_MESSAGES,
    RECOVERY_HINTS,
    AncestryError,
    ConfigError,
    DecodeError,
    ErrorCode,
    FormatError,
    TransportError,
    decode_error,
    field_count_error,
    invalid_hex_error,
    transport_error,
)
from ancestry.foundation.logging import configure_logging

__all__ = [
    "AncestryError",
    "ConfigError",
    "DecodeError",
    "ERROR_MESSAGES",
    "ErrorCode",
    "FormatError",
    "RECOVERY_HINTS",
    "TransportError",
    "configure_logging",
    "decode_error",
    "field_count_error",
    "invalid_hex_error",
    "transport_error",
]
