from __future__ import annotations

import logging
import threading
from pathlib import Path

import pytest

from kitchen_puppet.config import KitchenEnvironment


class FakeLibrarian:
    """Stands in for librarian-puppet; records calls and writes a module."""

    lock = threading.Lock()
    calls: list[tuple[Path, Path, bool]] = []
    loads = 0

    def __init__(self, puppetfile: Path, path: Path, log: logging.Logger | None = None) -> None:
        self.puppetfile = puppetfile
        self.path = path

    @classmethod
    def load(cls, log: logging.Logger | None = None) -> list[str]:
        cls.loads += 1
        return ["librarian-puppet"]

    def resolve(self) -> None:
        type(self).calls.append((self.puppetfile, self.path, type(self).lock.locked()))
        stdlib = self.path / "stdlib" / "manifests"
        stdlib.mkdir(parents=True, exist_ok=True)
        (stdlib / "init.pp").write_text("class stdlib {}\n", encoding="utf-8")


@pytest.fixture
def fake_librarian() -> type[FakeLibrarian]:
    FakeLibrarian.calls = []
    FakeLibrarian.loads = 0
    return FakeLibrarian


@pytest.fixture
def kitchen_root(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    (root / "manifests").mkdir(parents=True)
    (root / "manifests" / "site.pp").write_text("include foo\n", encoding="utf-8")
    (root / "modules" / "foo" / "manifests").mkdir(parents=True)
    (root / "modules" / "foo" / "manifests" / "init.pp").write_text("class foo {}\n", encoding="utf-8")
    return root


@pytest.fixture
def environment(kitchen_root: Path, tmp_path: Path) -> KitchenEnvironment:
    return KitchenEnvironment(kitchen_root=kitchen_root, sandbox_root=tmp_path / "sandboxes")


@pytest.fixture
def hiera_root(kitchen_root: Path) -> Path:
    root = kitchen_root
    (root / "hiera.yaml").write_text("---\n:backends:\n  - yaml\n", encoding="utf-8")
    (root / "hiera").mkdir()
    (root / "hiera" / "common.yaml").write_text("---\nfoo::enabled: true\n", encoding="utf-8")
    return root
