"""Wire models for the orchestrator's provenance endpoints."""

from dataclasses import dataclass

from pydantic import BaseModel

from ancestry.handle import Handle, Operation, Task, decode, try_decode


class JsonTask(BaseModel):
    """A task as sent on the wire: hex handle plus single-digit operation."""

    handle: str
    operation: str

    def to_task(self) -> Task:
        """Decode into a Task.

        Raises:
            FormatError: The handle is not valid hex text
            DecodeError: The handle or operation carries an invalid code
        """
        return Task(handle=decode(self.handle), operation=Operation.parse(self.operation))

    @classmethod
    def from_task(cls, task: Task) -> "JsonTask":
        return cls(handle=task.handle.to_hex(), operation=str(int(task.operation)))


class ParentsPayload(BaseModel):
    """``GET /parents`` body. ``parents`` is null while none are known."""

    parents: list[JsonTask] | None = None


class DependeesPayload(BaseModel):
    """``GET /dependees`` body."""

    dependees: list[JsonTask]


class ChildPayload(BaseModel):
    """``GET /child`` body."""

    child: str | None = None


@dataclass(frozen=True, slots=True)
class Parents:
    """Parents of a handle; None when the orchestrator knows none yet."""

    tasks: tuple[Task, ...] | None


@dataclass(frozen=True, slots=True)
class Dependees:
    tasks: tuple[Task, ...]


@dataclass(frozen=True, slots=True)
class Child:
    """The child produced by applying an operation, if known."""

    handle: Handle | None


Response = Parents | Dependees | Child


def parse_parents(payload: ParentsPayload) -> Parents:
    if payload.parents is None:
        return Parents(tasks=None)
    return Parents(tasks=tuple(task.to_task() for task in payload.parents))


def parse_dependees(payload: DependeesPayload) -> Dependees:
    return Dependees(tasks=tuple(task.to_task() for task in payload.dependees))


def parse_child(payload: ChildPayload) -> Child:
    if payload.child is None:
        return Child(handle=None)
    return Child(handle=try_decode(payload.child))
