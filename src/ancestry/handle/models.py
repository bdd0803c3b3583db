"""Handle data model.

A Handle names a build artifact in 256 bits. Its content is exactly one of:

    LiteralContent   value inlined in the handle (up to 31 bytes)
    OtherContent     an object of some ObjectType, addressed either by a
                     Canonical content hash or by a process-Local id

Handles are frozen dataclasses: equality is structural and hashing follows
equality, so they are safe to use as dict keys.
"""

from dataclasses import dataclass
from enum import IntEnum

from ancestry.foundation.errors import ErrorCode, decode_error

METADATA_LENGTH = 1
UINT64_LENGTH = 8
HANDLE_LENGTH = 32
LITERAL_CONTENT_LENGTH = HANDLE_LENGTH - METADATA_LENGTH
CANONICAL_HASH_LENGTH = HANDLE_LENGTH - UINT64_LENGTH - METADATA_LENGTH

MAX_LITERAL_SIZE = 0b1_1111
MAX_UINT64 = (1 << 64) - 1


class Accessibility(IntEnum):
    """How eagerly the referenced object is made available."""

    STRICT = 0
    SHALLOW = 1
    LAZY = 2

    @classmethod
    def from_code(cls, value: int) -> "Accessibility":
        """Map the two metadata bits to an Accessibility.

        Raises:
            DecodeError: If the code is not 0, 1 or 2
        """
        try:
            return cls(value)
        except ValueError:
            raise decode_error(ErrorCode.HANDLE_INVALID_ACCESSIBILITY, value=value) from None


class ObjectType(IntEnum):
    """Kind of a non-literal object.

    The integer values are the wire codes stored in the low two metadata bits.
    """

    TREE = 0
    THUNK = 1
    BLOB = 2
    TAG = 3

    @classmethod
    def from_code(cls, value: int) -> "ObjectType":
        """Map a wire code to an ObjectType.

        Raises:
            DecodeError: If the code is outside 0..3
        """
        try:
            return cls(value)
        except ValueError:
            raise decode_error(ErrorCode.HANDLE_INVALID_OBJECT_TYPE, value=value) from None

    @property
    def label(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True, slots=True)
class LiteralContent:
    """Inline value. Always carries the full 31 byte payload."""

    data: bytes

    def __post_init__(self) -> None:
        if len(self.data) != LITERAL_CONTENT_LENGTH:
            raise ValueError(
                f"Literal payload must be {LITERAL_CONTENT_LENGTH} bytes, got {len(self.data)}"
            )


@dataclass(frozen=True, slots=True)
class Canonical:
    """Content-addressed hash of a non-literal object."""

    hash: bytes

    def __post_init__(self) -> None:
        if len(self.hash) != CANONICAL_HASH_LENGTH:
            raise ValueError(
                f"Canonical hash must be {CANONICAL_HASH_LENGTH} bytes, got {len(self.hash)}"
            )


@dataclass(frozen=True, slots=True)
class Local:
    """Process-local, non content-addressed identifier."""

    id: int

    def __post_init__(self) -> None:
        if not 0 <= self.id <= MAX_UINT64:
            raise ValueError(f"Local id must fit in 64 bits: {self.id}")


@dataclass(frozen=True, slots=True)
class OtherContent:
    """Non-literal object reference."""

    object_type: ObjectType
    data: Canonical | Local


@dataclass(frozen=True, slots=True)
class Handle:
    """A 256-bit artifact identifier.

    Attributes:
        size: Entry count or byte length of the referenced object. For
            literals this is the number of meaningful payload bytes.
        accessibility: Caching/eagerness policy, orthogonal to content.
        content: Literal payload or a typed Canonical/Local reference.
    """

    size: int
    accessibility: Accessibility
    content: LiteralContent | OtherContent

    def __post_init__(self) -> None:
        if not 0 <= self.size <= MAX_UINT64:
            raise ValueError(f"Handle size must fit in 64 bits: {self.size}")
        if isinstance(self.content, LiteralContent) and self.size > MAX_LITERAL_SIZE:
            raise ValueError(f"Literal size must be at most {MAX_LITERAL_SIZE}: {self.size}")

    @classmethod
    def literal(
        cls,
        data: bytes,
        accessibility: Accessibility = Accessibility.STRICT,
    ) -> "Handle":
        """Build a literal handle from up to 31 raw bytes."""
        if len(data) > LITERAL_CONTENT_LENGTH:
            raise ValueError(
                f"Literal data must be at most {LITERAL_CONTENT_LENGTH} bytes, got {len(data)}"
            )
        padded = data.ljust(LITERAL_CONTENT_LENGTH, b"\x00")
        return cls(size=len(data), accessibility=accessibility, content=LiteralContent(padded))

    @property
    def is_literal(self) -> bool:
        return isinstance(self.content, LiteralContent)

    @property
    def object_type(self) -> ObjectType | None:
        """Object type of a non-literal handle, None for literals."""
        if isinstance(self.content, OtherContent):
            return self.content.object_type
        return None

    def get_literal_content(self) -> bytes | None:
        """Return the meaningful literal bytes, or None if not a literal."""
        if isinstance(self.content, LiteralContent):
            return self.content.data[: self.size]
        return None

    def to_hex(self) -> str:
        """Canonical text form, see ancestry.handle.codec.encode."""
        from ancestry.handle.codec import encode

        return encode(self)

    @classmethod
    def from_hex(cls, text: str) -> "Handle":
        """Parse the canonical text form, see ancestry.handle.codec.decode."""
        from ancestry.handle.codec import decode

        return decode(text)

    def describe(self) -> str:
        """Human readable summary, e.g. ``&strict Thunk(local 217, size 4)``."""
        prefix = f"&{self.accessibility.name.lower()}"
        if isinstance(self.content, LiteralContent):
            return f"{prefix} Literal({self.get_literal_content()!r})"
        data = self.content.data
        if isinstance(data, Canonical):
            ref = f"hash {data.hash.hex()}"
        else:
            ref = f"local {data.id}"
        return f"{prefix} {self.content.object_type.label}({ref}, size {self.size})"

    def __str__(self) -> str:
        return self.to_hex()
