from __future__ import annotations

import sys
from pathlib import Path

from kitchen_puppet.provisioners.command_runner import run_command


def test_captures_output_and_exit_code(tmp_path: Path) -> None:
    result = run_command(
        [sys.executable, "-c", "import os, sys; print(os.getcwd()); sys.exit(3)"],
        cwd=tmp_path,
    )
    assert result.exit_code == 3
    assert not result.ok
    assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()


def test_missing_executable_reports_127(tmp_path: Path) -> None:
    result = run_command([str(tmp_path / "no-such-binary")], cwd=tmp_path)
    assert result.exit_code == 127
    assert result.stdout == ""
    assert result.stderr
