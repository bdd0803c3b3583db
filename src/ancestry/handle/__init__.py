"""Handles: 256-bit artifact identifiers and their hexadecimal text form.

Example:
    >>> from ancestry.handle import decode, encode
    >>> handle = decode("d9-0-4-100000000000000")
    >>> handle.describe()
    '&strict Thunk(local 217, size 4)'
    >>> encode(handle)
    'd9-0-4-100000000000000'
"""

from ancestry.handle.codec import (
    decode,
    encode,
    from_bytes,
    get_literal_content,
    to_bytes,
    try_decode,
)
from ancestry.handle.models import (
    CANONICAL_HASH_LENGTH,
    HANDLE_LENGTH,
    LITERAL_CONTENT_LENGTH,
    Accessibility,
    Canonical,
    Handle,
    LiteralContent,
    Local,
    ObjectType,
    OtherContent,
)
from ancestry.handle.task import Operation, Task

__all__ = [
    "Accessibility",
    "CANONICAL_HASH_LENGTH",
    "Canonical",
    "HANDLE_LENGTH",
    "Handle",
    "LITERAL_CONTENT_LENGTH",
    "LiteralContent",
    "Local",
    "ObjectType",
    "Operation",
    "OtherContent",
    "Task",
    "decode",
    "encode",
    "from_bytes",
    "get_literal_content",
    "to_bytes",
    "try_decode",
]
