"""Handle text codec.

A handle travels as four dash-separated hexadecimal u64 words, for example
``d9-0-4-100000000000000``. Each word is the little-endian view of 8 bytes of
the 32 byte packed handle. The last byte is metadata::

    literal:      | accessibility (2) | 1 (1) | literal size (5)            |
    non-literal:  | accessibility (2) | 0 (1) | 00 | canonical (1) | type (2) |

Byte layout of the remaining 31 bytes::

    literal:    data (31)
    canonical:  hash (16) | size (8) | hash (7)
    local:      id (8) | zero (8) | size (8) | zero (7)
"""

import logging
import re

from ancestry.foundation.errors import (
    ErrorCode,
    decode_error,
    field_count_error,
    invalid_hex_error,
)
from ancestry.handle.models import (
    CANONICAL_HASH_LENGTH,
    HANDLE_LENGTH,
    LITERAL_CONTENT_LENGTH,
    MAX_UINT64,
    UINT64_LENGTH,
    Accessibility,
    Canonical,
    Handle,
    LiteralContent,
    Local,
    ObjectType,
    OtherContent,
)

logger = logging.getLogger(__name__)

FIELD_COUNT = HANDLE_LENGTH // UINT64_LENGTH
SEPARATOR = "-"

_LITERAL_FLAG = 0b10_0000
_LITERAL_SIZE_MASK = 0b1_1111
_RESERVED_MASK = 0b1_1000
_CANONICAL_FLAG = 0b100
_OBJECT_TYPE_MASK = 0b11
_ACCESSIBILITY_SHIFT = 6

_SIZE_WINDOW = slice(UINT64_LENGTH * 2, UINT64_LENGTH * 3)
_HASH_HEAD = slice(0, UINT64_LENGTH * 2)
_HASH_TAIL = slice(UINT64_LENGTH * 3, HANDLE_LENGTH - 1)
_LOCAL_ID = slice(0, UINT64_LENGTH)
_LOCAL_PADDING = (slice(UINT64_LENGTH, UINT64_LENGTH * 2), _HASH_TAIL)

_HEX_FIELD = re.compile(r"[0-9a-fA-F]+")


def decode(text: str) -> Handle:
    """Parse a handle from its hexadecimal text form.

    Args:
        text: Four dash-separated hex u64 words, e.g. ``10-0-0-2400000000000000``

    Returns:
        The decoded Handle

    Raises:
        FormatError: Wrong number of fields or a field that is not hex u64
        DecodeError: Metadata carries an invalid accessibility or non-zero
            reserved bits
    """
    fields = text.split(SEPARATOR)
    if len(fields) != FIELD_COUNT:
        raise field_count_error(text, len(fields))

    words = []
    for field in fields:
        if not _HEX_FIELD.fullmatch(field):
            raise invalid_hex_error(text, f"'{field}' is not hexadecimal")
        word = int(field, 16)
        if word > MAX_UINT64:
            raise invalid_hex_error(text, f"'{field}' does not fit in 64 bits")
        words.append(word)

    buffer = b"".join(word.to_bytes(UINT64_LENGTH, "little") for word in words)
    return from_bytes(buffer)


def from_bytes(buffer: bytes) -> Handle:
    """Unpack a 32 byte buffer into a Handle.

    Raises:
        ValueError: If the buffer is not 32 bytes long
        DecodeError: On invalid metadata codes or non-zero reserved bits
    """
    if len(buffer) != HANDLE_LENGTH:
        raise ValueError(f"Packed handle must be {HANDLE_LENGTH} bytes, got {len(buffer)}")

    metadata = buffer[HANDLE_LENGTH - 1]
    accessibility = Accessibility.from_code(metadata >> _ACCESSIBILITY_SHIFT)

    if metadata & _LITERAL_FLAG:
        return Handle(
            size=metadata & _LITERAL_SIZE_MASK,
            accessibility=accessibility,
            content=LiteralContent(bytes(buffer[:LITERAL_CONTENT_LENGTH])),
        )

    if metadata & _RESERVED_MASK:
        raise decode_error(
            ErrorCode.HANDLE_RESERVED_BITS,
            value=metadata,
            detail=f"metadata byte {metadata:#010b}",
        )

    object_type = ObjectType.from_code(metadata & _OBJECT_TYPE_MASK)
    size = int.from_bytes(buffer[_SIZE_WINDOW], "little")

    data: Canonical | Local
    if metadata & _CANONICAL_FLAG:
        data = Canonical(bytes(buffer[_HASH_HEAD] + buffer[_HASH_TAIL]))
    else:
        if any(any(buffer[window]) for window in _LOCAL_PADDING):
            raise decode_error(
                ErrorCode.HANDLE_RESERVED_BITS,
                value=metadata,
                detail="local handle padding is not zero",
            )
        data = Local(int.from_bytes(buffer[_LOCAL_ID], "little"))

    return Handle(
        size=size,
        accessibility=accessibility,
        content=OtherContent(object_type=object_type, data=data),
    )


def to_bytes(handle: Handle) -> bytes:
    """Pack a Handle into its 32 byte buffer."""
    out = bytearray(HANDLE_LENGTH)
    metadata = int(handle.accessibility) << _ACCESSIBILITY_SHIFT

    content = handle.content
    if isinstance(content, LiteralContent):
        out[:LITERAL_CONTENT_LENGTH] = content.data
        out[HANDLE_LENGTH - 1] = metadata | _LITERAL_FLAG | (handle.size & _LITERAL_SIZE_MASK)
        return bytes(out)

    metadata |= int(content.object_type)
    out[_SIZE_WINDOW] = handle.size.to_bytes(UINT64_LENGTH, "little")

    data = content.data
    if isinstance(data, Canonical):
        metadata |= _CANONICAL_FLAG
        out[_HASH_HEAD] = data.hash[: UINT64_LENGTH * 2]
        out[_HASH_TAIL] = data.hash[UINT64_LENGTH * 2 : CANONICAL_HASH_LENGTH]
    else:
        out[_LOCAL_ID] = data.id.to_bytes(UINT64_LENGTH, "little")

    out[HANDLE_LENGTH - 1] = metadata
    return bytes(out)


def encode(handle: Handle) -> str:
    """Render a Handle as four dash-joined, unpadded lowercase hex words."""
    buffer = to_bytes(handle)
    return SEPARATOR.join(
        format(int.from_bytes(buffer[i : i + UINT64_LENGTH], "little"), "x")
        for i in range(0, HANDLE_LENGTH, UINT64_LENGTH)
    )


def get_literal_content(handle: Handle) -> bytes | None:
    """Return the first ``size`` literal bytes, or None for non-literals."""
    return handle.get_literal_content()


def try_decode(text: str) -> Handle | None:
    """Decode, logging and swallowing malformed input.

    Used where a peer may legitimately send garbage that should read as
    "no handle" (the child endpoint).
    """
    try:
        return decode(text)
    except ValueError as e:
        logger.debug("Ignoring undecodable handle %r: %s", text, e)
        return None
