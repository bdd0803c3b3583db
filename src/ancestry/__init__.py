"""Ancestry - explore the provenance of content-addressed build artifacts.

Given a handle, Ancestry asks the build orchestrator which tasks produced it
and grows an append-only tree of those ancestors, one generation at a time.

Example:
    >>> from ancestry.handle import decode
    >>> from ancestry.graph import AncestryView
    >>> view = AncestryView()
    >>> graph = view.set_main_handle(decode("d9-0-4-100000000000000"))
"""

__version__ = "0.1.0"

from ancestry.foundation.errors import (
    AncestryError,
    DecodeError,
    ErrorCode,
    FormatError,
    TransportError,
)
from ancestry.graph import AncestorGraph, AncestryView, Element, MergeResult, MergeStatus
from ancestry.handle import Handle, Operation, Task, decode, encode

__all__ = [
    "AncestorGraph",
    "AncestryError",
    "AncestryView",
    "DecodeError",
    "Element",
    "ErrorCode",
    "FormatError",
    "Handle",
    "MergeResult",
    "MergeStatus",
    "Operation",
    "Task",
    "TransportError",
    "__version__",
    "decode",
    "encode",
]
