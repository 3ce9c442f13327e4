from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from ctxroots.locator import ContextLocator  # noqa: E402
from ctxroots.resources import MemoryResourceProvider  # noqa: E402


@dataclass(slots=True)
class Workspace:
    """Fixture payload representing an on-disk workspace under test."""

    root: Path

    def file(self, relative: str, content: str = "") -> Path:
        """Create ``relative`` (and its parents) under the workspace root."""

        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def folder(self, relative: str) -> Path:
        path = self.root / relative
        path.mkdir(parents=True, exist_ok=True)
        return path

    def path(self, relative: str = "") -> str:
        return str((self.root / relative).resolve()) if relative else str(self.root.resolve())


@pytest.fixture()
def provider() -> MemoryResourceProvider:
    return MemoryResourceProvider()


@pytest.fixture()
def locator(provider: MemoryResourceProvider) -> ContextLocator:
    return ContextLocator(provider)


@pytest.fixture()
def workspace(tmp_path: Path) -> Workspace:
    """Create an empty on-disk workspace with no configuration above it."""

    root = tmp_path / "workspace"
    root.mkdir()
    return Workspace(root=root)
