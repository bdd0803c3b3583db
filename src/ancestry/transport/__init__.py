"""Transport - fetching provenance from the build orchestrator over HTTP."""

from ancestry.transport.client import (
    DEFAULT_URL,
    OrchestratorClient,
    from_httpx_error,
    normalize_base_url,
)
from ancestry.transport.models import (
    Child,
    ChildPayload,
    Dependees,
    DependeesPayload,
    JsonTask,
    Parents,
    ParentsPayload,
    Response,
)

__all__ = [
    "Child",
    "ChildPayload",
    "DEFAULT_URL",
    "Dependees",
    "DependeesPayload",
    "JsonTask",
    "OrchestratorClient",
    "Parents",
    "ParentsPayload",
    "Response",
    "from_httpx_error",
    "normalize_base_url",
]
