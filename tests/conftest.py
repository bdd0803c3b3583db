"""Pytest fixtures for Ancestry tests."""

import logging
import os
from pathlib import Path

import pytest

from ancestry.config import reset_config
from ancestry.graph import AncestorGraph, Element
from ancestry.handle import Handle, Operation, Task, decode

LITERAL_HEX = "10-0-0-2400000000000000"
LOCAL_HEX = "d9-0-4-100000000000000"
CANONICAL_HEX = "862fcba5ecaade2c-4b24159ac7c28a29-3-715eb1e41f37d42"


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Run every test away from real config files and ANCESTRY_* variables."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for key in [k for k in os.environ if k.startswith("ANCESTRY_")]:
        monkeypatch.delenv(key)
    reset_config()

    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    # Drop handlers installed by configure_logging, keep pytest's own
    for handler in list(root_logger.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)
    reset_config()


@pytest.fixture
def local_handle() -> Handle:
    return decode(LOCAL_HEX)


def local(n: int, size: int = 1) -> Handle:
    """A distinct Thunk handle per ``n``."""
    return decode(f"{n:x}-0-{size:x}-100000000000000")


@pytest.fixture
def make_handle():
    return local


@pytest.fixture
def graph() -> AncestorGraph:
    """Graph rooted at local(0) with parents local(1) (Apply) and local(2) (Eval)."""
    g = AncestorGraph(Element(local(0)))
    g.merge_new_parents(
        local(0),
        [Task(local(1), Operation.APPLY), Task(local(2), Operation.EVAL)],
    )
    return g
