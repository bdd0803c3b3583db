"""Provenance edges: a parent handle and the operation that consumed it."""

import re
from dataclasses import dataclass
from enum import IntEnum

from ancestry.foundation.errors import ErrorCode, decode_error
from ancestry.handle.models import Handle

_WIRE_DIGIT = re.compile(r"[0-9]")


class Operation(IntEnum):
    """How a parent contributes to producing its child.

    The integer values are the single-digit wire codes.
    """

    APPLY = 0
    EVAL = 1
    FILL = 2

    @classmethod
    def from_code(cls, value: int) -> "Operation":
        """Map a wire code to an Operation.

        Raises:
            DecodeError: If the code is not 0, 1 or 2
        """
        try:
            return cls(value)
        except ValueError:
            raise decode_error(ErrorCode.HANDLE_INVALID_OPERATION, value=value) from None

    @classmethod
    def parse(cls, text: str) -> "Operation":
        """Parse the wire form, a single digit string such as ``"1"``."""
        if not _WIRE_DIGIT.fullmatch(text):
            raise decode_error(ErrorCode.HANDLE_INVALID_OPERATION, value=repr(text))
        return cls.from_code(int(text))

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def color(self) -> str:
        """Display color used for arrows and tree branches."""
        return _OPERATION_COLORS[self]


_OPERATION_COLORS = {
    Operation.APPLY: "red",
    Operation.EVAL: "blue",
    Operation.FILL: "green",
}


@dataclass(frozen=True, slots=True)
class Task:
    """``handle`` combined via ``operation`` contributes to some child."""

    handle: Handle
    operation: Operation

    def __str__(self) -> str:
        return f"{self.handle.to_hex()}: {self.operation.label}"
