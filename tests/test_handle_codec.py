"""Tests for the handle text codec and data model."""

import pytest

from ancestry.foundation.errors import DecodeError, ErrorCode, FormatError
from ancestry.handle import (
    Accessibility,
    Canonical,
    Handle,
    LiteralContent,
    Local,
    ObjectType,
    OtherContent,
    decode,
    encode,
    from_bytes,
    get_literal_content,
    to_bytes,
    try_decode,
)

LITERAL_HEX = "10-0-0-2400000000000000"
LOCAL_HEX = "d9-0-4-100000000000000"
CANONICAL_HEX = "862fcba5ecaade2c-4b24159ac7c28a29-3-715eb1e41f37d42"


class TestKnownHandles:
    """Test decoding of handles observed from a real orchestrator."""

    def test_literal(self) -> None:
        handle = decode(LITERAL_HEX)

        assert handle.size == 4
        assert handle.accessibility is Accessibility.STRICT
        assert isinstance(handle.content, LiteralContent)
        assert handle.content.data[0] == 16
        assert handle.get_literal_content() == b"\x10\x00\x00\x00"
        assert encode(handle) == LITERAL_HEX

    def test_local(self) -> None:
        handle = decode(LOCAL_HEX)

        assert handle == Handle(
            size=4,
            accessibility=Accessibility.STRICT,
            content=OtherContent(object_type=ObjectType.THUNK, data=Local(217)),
        )
        assert encode(handle) == LOCAL_HEX

    def test_canonical(self) -> None:
        handle = decode(CANONICAL_HEX)

        expected_hash = (
            (0x862FCBA5ECAADE2C).to_bytes(8, "little")
            + (0x4B24159AC7C28A29).to_bytes(8, "little")
            + (0x0715EB1E41F37D42).to_bytes(8, "little")[:7]
        )
        assert handle.size == 3
        assert handle.accessibility is Accessibility.STRICT
        assert handle.object_type is ObjectType.TAG
        assert handle.content == OtherContent(ObjectType.TAG, Canonical(expected_hash))
        assert encode(handle) == CANONICAL_HEX

    def test_describe(self) -> None:
        assert decode(LOCAL_HEX).describe() == "&strict Thunk(local 217, size 4)"
        assert str(decode(LOCAL_HEX)) == LOCAL_HEX


class TestRejectedText:
    """Test that malformed text is rejected with a FormatError."""

    @pytest.mark.parametrize("text", ["", "1-2-3", "1-2-3-4-5", "d9-0-4-1-0"])
    def test_wrong_field_count(self, text: str) -> None:
        with pytest.raises(FormatError) as exc_info:
            decode(text)
        assert exc_info.value.code is ErrorCode.HANDLE_FIELD_COUNT

    @pytest.mark.parametrize(
        "text",
        [
            "xyz-0-0-0",
            "-1-0-0",
            "+1-0-0-0",
            "0x10-0-0-0",
            " 10-0-0-2400000000000000",
            "10-0-0-2400000000000000\n",
            "10-0-0-2400000000000000 ",
            "10000000000000000-0-0-2400000000000000",
        ],
    )
    def test_invalid_field(self, text: str) -> None:
        with pytest.raises(FormatError) as exc_info:
            decode(text)
        assert exc_info.value.code is ErrorCode.HANDLE_INVALID_HEX

    def test_format_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            decode("nope")


class TestRejectedMetadata:
    """Test that well-formed text with invalid metadata raises DecodeError."""

    def test_accessibility_three(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            decode("0-0-0-c000000000000000")
        assert exc_info.value.code is ErrorCode.HANDLE_INVALID_ACCESSIBILITY

    def test_accessibility_three_on_literal(self) -> None:
        with pytest.raises(DecodeError):
            decode("0-0-0-e000000000000000")

    @pytest.mark.parametrize("metadata", ["08", "10", "18"])
    def test_reserved_bits(self, metadata: str) -> None:
        with pytest.raises(DecodeError) as exc_info:
            decode(f"d9-0-4-{metadata}00000000000000")
        assert exc_info.value.code is ErrorCode.HANDLE_RESERVED_BITS

    def test_local_padding_must_be_zero(self) -> None:
        with pytest.raises(DecodeError):
            decode("d9-1-4-100000000000000")
        with pytest.raises(DecodeError):
            decode("d9-0-4-100000000000005")


class TestLenientInput:
    """Test inputs that decode but do not render back identically."""

    def test_uppercase(self) -> None:
        assert decode(LOCAL_HEX.upper()) == decode(LOCAL_HEX)
        assert encode(decode(LOCAL_HEX.upper())) == LOCAL_HEX

    def test_leading_zeros(self) -> None:
        assert encode(decode("00d9-000-4-0100000000000000")) == LOCAL_HEX


class TestRoundTrip:
    """Test that encode is the exact inverse of decode."""

    @pytest.mark.parametrize(
        "text",
        [
            LITERAL_HEX,
            LOCAL_HEX,
            CANONICAL_HEX,
            "0-0-0-2000000000000000",
            "ff10-0-0-2100000000000000",
            "0-0-0-0",
            "ffffffffffffffff-0-ffffffffffffffff-8200000000000000",
            "1-2-3-47ffffffffffffff",
        ],
    )
    def test_text(self, text: str) -> None:
        assert encode(decode(text)) == text

    def test_bytes(self) -> None:
        handle = decode(CANONICAL_HEX)
        packed = to_bytes(handle)

        assert len(packed) == 32
        assert from_bytes(packed) == handle

    def test_from_bytes_wrong_length(self) -> None:
        with pytest.raises(ValueError):
            from_bytes(bytes(31))

    def test_lazy_local(self) -> None:
        handle = Handle(
            size=12,
            accessibility=Accessibility.LAZY,
            content=OtherContent(ObjectType.BLOB, Local(5)),
        )
        assert encode(handle) == "5-0-c-8200000000000000"
        assert decode(encode(handle)) == handle

    def test_hex_methods(self) -> None:
        handle = Handle.from_hex(LOCAL_HEX)
        assert handle.to_hex() == LOCAL_HEX


class TestLiteralContent:
    """Test literal payload access."""

    def test_only_size_bytes_are_returned(self) -> None:
        handle = decode("ff10-0-0-2100000000000000")

        assert handle.size == 1
        assert get_literal_content(handle) == b"\x10"
        assert handle.content.data[1] == 0xFF

    def test_empty_literal(self) -> None:
        assert get_literal_content(decode("0-0-0-2000000000000000")) == b""

    def test_non_literal_has_no_content(self) -> None:
        assert get_literal_content(decode(LOCAL_HEX)) is None
        assert decode(LOCAL_HEX).is_literal is False

    def test_literal_constructor(self) -> None:
        handle = Handle.literal(b"hi", Accessibility.SHALLOW)

        assert handle.size == 2
        assert handle.get_literal_content() == b"hi"
        assert handle.object_type is None
        assert encode(handle) == "6968-0-0-6200000000000000"

    def test_literal_constructor_limit(self) -> None:
        assert Handle.literal(b"x" * 31).size == 31
        with pytest.raises(ValueError):
            Handle.literal(b"x" * 32)


class TestHandleValidation:
    """Test field width checks on directly constructed handles."""

    def test_canonical_hash_length(self) -> None:
        with pytest.raises(ValueError):
            Canonical(bytes(22))

    def test_local_id_range(self) -> None:
        with pytest.raises(ValueError):
            Local(-1)
        with pytest.raises(ValueError):
            Local(1 << 64)

    def test_literal_size_limit(self) -> None:
        with pytest.raises(ValueError):
            Handle(size=32, accessibility=Accessibility.STRICT, content=LiteralContent(bytes(31)))

    def test_handles_are_hashable(self) -> None:
        assert len({decode(LOCAL_HEX), decode(LOCAL_HEX), decode(LITERAL_HEX)}) == 2


class TestTryDecode:
    def test_valid(self) -> None:
        assert try_decode(LOCAL_HEX) == decode(LOCAL_HEX)

    @pytest.mark.parametrize("text", ["garbage", "0-0-0-c000000000000000"])
    def test_invalid_is_none(self, text: str) -> None:
        assert try_decode(text) is None
