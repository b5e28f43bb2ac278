from dataclasses import dataclass
from pathlib import Path

import pytest

from hashfile.config.models import HashfileConfig
from hashfile.core.hashline import build_snapshot
from hashfile.tools.registry import ToolRegistry


@dataclass(frozen=True)
class Workspace:
    """A temp directory with a registry whose only root is that directory."""

    root: Path
    registry: ToolRegistry

    def file(self, name: str, content: str) -> Path:
        path = self.root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content.encode("utf-8"))
        return path

    def read(self, name: str) -> str:
        return (self.root / name).read_bytes().decode("utf-8")


@pytest.fixture()
def make_config(tmp_path: Path):
    def _make(**overrides):
        data = {"paths": {"cwd": str(tmp_path), "roots": [str(tmp_path)]}}
        data.update(overrides)
        return HashfileConfig(**data)

    return _make


@pytest.fixture()
def workspace(tmp_path: Path, make_config) -> Workspace:
    return Workspace(root=tmp_path.resolve(), registry=ToolRegistry(make_config()))


@pytest.fixture()
def snapshot_of():
    """Build a snapshot straight from a string."""

    def _snap(content: str):
        return build_snapshot(content.encode("utf-8"))

    return _snap


@pytest.fixture()
def abc(snapshot_of):
    # a -> 8c, b -> a5, c -> f2
    return snapshot_of("a\nb\nc\n")
