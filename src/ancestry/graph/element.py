"""Graph node content: a handle plus whatever the renderer attaches to it."""

from dataclasses import dataclass, field
from typing import Any

from ancestry.handle import Handle


@dataclass(slots=True)
class Element:
    """A handle as the renderer sees it.

    The graph only ever reads ``handle``. ``label`` is the text drawn in the
    element's box and ``state`` is free for renderer-specific data (cached
    meshes, highlight flags, ...).
    """

    handle: Handle
    label: str = ""
    state: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.label:
            self.label = self.handle.to_hex()

    def get_text(self) -> str:
        return self.label
