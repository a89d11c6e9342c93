from __future__ import annotations

import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Sandbox:
    id: str
    root: Path


def allocate_sandbox(sandbox_root: Path, prefix: str = "puppet-apply") -> Sandbox:
    # Each provisioning session stages into its own fresh directory.
    sandbox_root.mkdir(parents=True, exist_ok=True)
    sandbox_id = uuid.uuid4().hex
    sandbox_path = sandbox_root / f"{prefix}-{sandbox_id}"
    sandbox_path.mkdir(mode=0o755)
    return Sandbox(id=sandbox_id, root=sandbox_path)


def mirror_contents(source: Path, destination: Path) -> list[Path]:
    """Copy the visible entries of ``source`` into ``destination``.

    Behaves like ``cp -r source/* destination``: hidden entries are skipped,
    existing files are overwritten and the destination is created if needed.
    Returns the copied top-level entries.
    """
    if not source.is_dir():
        raise FileNotFoundError(f"Directory not found: {source}")
    destination.mkdir(parents=True, exist_ok=True)

    copied: list[Path] = []
    for entry in sorted(source.iterdir()):
        if entry.name.startswith("."):
            continue
        target = destination / entry.name
        if entry.is_dir():
            shutil.copytree(entry, target, dirs_exist_ok=True)
        else:
            shutil.copy2(entry, target)
        copied.append(target)
    return copied


def copy_file(source: Path, destination: Path) -> Path:
    if not source.is_file():
        raise FileNotFoundError(f"File not found: {source}")
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, destination)
    return destination


def remove_sandbox(path: Path) -> None:
    shutil.rmtree(path)
