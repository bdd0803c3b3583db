"""Ancestry error system.

Provides structured error handling with:
- Numeric error codes for programmatic handling
- User-friendly messages
- Recovery hints shown next to the message in the CLI
- Context for debugging
"""


from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Numeric error codes organized by category.

    Format: XYYY where X = category, YYY = specific error

    Categories:
        1xxx - Handle text/encoding errors
        3xxx - Transport errors
        5xxx - Configuration errors
    """

    # 1xxx - Handle Errors
    HANDLE_FIELD_COUNT = 1001
    HANDLE_INVALID_HEX = 1002
    HANDLE_INVALID_ACCESSIBILITY = 1101
    HANDLE_INVALID_OBJECT_TYPE = 1102
    HANDLE_RESERVED_BITS = 1103
    HANDLE_INVALID_OPERATION = 1104

    # 3xxx - Transport Errors
    TRANSPORT_BUILDER = 3001
    TRANSPORT_REQUEST = 3002
    TRANSPORT_REDIRECT = 3003
    TRANSPORT_STATUS = 3004
    TRANSPORT_BODY = 3005
    TRANSPORT_DECODE = 3006
    TRANSPORT_TIMEOUT = 3007
    TRANSPORT_UNKNOWN = 3099

    # 5xxx - Configuration Errors
    CONFIG_INVALID = 5001

    @property
    def category(self) -> str:
        """Get the error category name."""
        prefix = self.value // 1000
        return {
            1: "handle",
            3: "transport",
            5: "config",
        }.get(prefix, "unknown")

    @property
    def is_recoverable(self) -> bool:
        """Whether this error type is typically recoverable."""
        return self is not ErrorCode.CONFIG_INVALID


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    # Handle errors
    ErrorCode.HANDLE_FIELD_COUNT: "Expected handle with exactly 4 parts, got {count}: '{text}'",
    ErrorCode.HANDLE_INVALID_HEX: "Failed to parse handle from hex: '{text}' ({detail})",
    ErrorCode.HANDLE_INVALID_ACCESSIBILITY: "Invalid number for accessibility: {value}",
    ErrorCode.HANDLE_INVALID_OBJECT_TYPE: "Invalid number for object type: {value}",
    ErrorCode.HANDLE_RESERVED_BITS: "Handle has non-zero reserved bits: {detail}",
    ErrorCode.HANDLE_INVALID_OPERATION: "Invalid number for operation: {value}",

    # Transport errors
    ErrorCode.TRANSPORT_BUILDER: "request failed: building url error ({url})",
    ErrorCode.TRANSPORT_REQUEST: "request failed: request error ({url})",
    ErrorCode.TRANSPORT_REDIRECT: "request failed: redirect error ({url})",
    ErrorCode.TRANSPORT_STATUS: "request failed: status code error ({url}: {status})",
    ErrorCode.TRANSPORT_BODY: "request failed: body error ({url})",
    ErrorCode.TRANSPORT_DECODE: "request failed: decode error ({url}: {detail})",
    ErrorCode.TRANSPORT_TIMEOUT: "request failed: timeout error ({url})",
    ErrorCode.TRANSPORT_UNKNOWN: "request failed: unknown error ({url})",

    # Config errors
    ErrorCode.CONFIG_INVALID: "Invalid configuration in '{path}': {detail}",
}


# Recovery hints
RECOVERY_HINTS: dict[ErrorCode, list[str]] = {
    ErrorCode.HANDLE_FIELD_COUNT: [
        "Handles look like d9-0-4-100000000000000",
        "Check that the value was not truncated when copying",
    ],
    ErrorCode.HANDLE_INVALID_HEX: [
        "Each field is an unpadded lowercase hexadecimal u64",
    ],
    ErrorCode.TRANSPORT_REQUEST: [
        "Check that the server at {url} is running",
        "Set a different server with --url or server.url in .ancestry/config.yaml",
    ],
    ErrorCode.TRANSPORT_TIMEOUT: [
        "Raise server.timeout in .ancestry/config.yaml",
    ],
}


class AncestryError(Exception):
    """Base error type for all Ancestry errors.

    Example:
        >>> err = AncestryError(
        ...     code=ErrorCode.HANDLE_INVALID_ACCESSIBILITY,
        ...     context={"value": 3},
        ... )
        >>> print(err)
        [AN-1101] Invalid number for accessibility: 3
    """

    def __init__(
        self,
        code: ErrorCode,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        self.code = code
        self.context = context or {}
        self.cause = cause
        super().__init__(str(self))

    @property
    def message(self) -> str:
        """Get the formatted user-friendly message."""
        template = ERROR_MESSAGES.get(self.code, "An error occurred: {detail}")
        try:
            return template.format(**self.context)
        except KeyError:
            return template

    @property
    def recovery_hints(self) -> list[str]:
        """Get recovery suggestions for this error."""
        formatted = []
        for hint in RECOVERY_HINTS.get(self.code, []):
            try:
                formatted.append(hint.format(**self.context))
            except KeyError:
                formatted.append(hint)
        return formatted

    @property
    def is_recoverable(self) -> bool:
        """Whether this error is typically recoverable."""
        return self.code.is_recoverable

    @property
    def category(self) -> str:
        """Get the error category."""
        return self.code.category

    @property
    def error_id(self) -> str:
        """Get the error ID string (e.g., 'AN-1001')."""
        return f"AN-{self.code.value}"

    def __str__(self) -> str:
        return f"[{self.error_id}] {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, context={self.context!r})"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dict for logging and --json output."""
        return {
            "error_id": self.error_id,
            "code": self.code.value,
            "category": self.category,
            "message": self.message,
            "recoverable": self.is_recoverable,
            "recovery_hints": self.recovery_hints,
            "context": {k: str(v) for k, v in self.context.items()},
        }


class FormatError(AncestryError, ValueError):
    """Handle text is not four dash-separated hexadecimal u64 fields."""


class DecodeError(AncestryError, ValueError):
    """Handle bytes are well formed but carry an unrecognized code."""


class TransportError(AncestryError):
    """A request to the orchestrator failed."""

    _KINDS = {
        ErrorCode.TRANSPORT_BUILDER: "builder",
        ErrorCode.TRANSPORT_REQUEST: "request",
        ErrorCode.TRANSPORT_REDIRECT: "redirect",
        ErrorCode.TRANSPORT_STATUS: "status",
        ErrorCode.TRANSPORT_BODY: "body",
        ErrorCode.TRANSPORT_DECODE: "decode",
        ErrorCode.TRANSPORT_TIMEOUT: "timeout",
        ErrorCode.TRANSPORT_UNKNOWN: "unknown",
    }

    @property
    def kind(self) -> str:
        """Classification of the failure, e.g. 'timeout' or 'status'."""
        return self._KINDS.get(self.code, "unknown")


class ConfigError(AncestryError):
    """A configuration file could not be used."""


# Convenience factory functions

def field_count_error(text: str, count: int) -> FormatError:
    """Create a HANDLE_FIELD_COUNT error."""
    return FormatError(
        code=ErrorCode.HANDLE_FIELD_COUNT,
        context={"text": text, "count": count},
    )


def invalid_hex_error(text: str, detail: str, cause: Exception | None = None) -> FormatError:
    """Create a HANDLE_INVALID_HEX error."""
    return FormatError(
        code=ErrorCode.HANDLE_INVALID_HEX,
        context={"text": text, "detail": detail},
        cause=cause,
    )


def decode_error(code: ErrorCode, value: Any = "", detail: str = "") -> DecodeError:
    """Create a handle decoding error."""
    return DecodeError(code=code, context={"value": value, "detail": detail})


def transport_error(
    kind: str,
    url: str,
    detail: str = "",
    cause: Exception | None = None,
    **extra: Any,
) -> TransportError:
    """Create a transport error from its classification."""
    codes = {v: k for k, v in TransportError._KINDS.items()}
    return TransportError(
        code=codes.get(kind, ErrorCode.TRANSPORT_UNKNOWN),
        context={"url": url, "detail": detail, **extra},
        cause=cause,
    )
