from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from daggy.errors import CommandError  # noqa: E402


class FakeRunner:
    """Record commands instead of running them."""

    def __init__(self, outputs: dict[str, str] | None = None, failures: Sequence[str] = ()) -> None:
        self.calls: list[tuple[tuple[str, ...], Path]] = []
        self.outputs = dict(outputs or {})
        self.failures = set(failures)

    def run(self, command: Sequence[str], cwd: str | Path) -> str:
        key = " ".join(command)
        self.calls.append((tuple(command), Path(cwd)))
        if key in self.failures or str(cwd) in self.failures:
            raise CommandError(command, Path(cwd), 1, "boom")
        return self.outputs.get(key, "")

    def commands(self) -> list[str]:
        return [" ".join(command) for command, _ in self.calls]


def write_tree(root: Path, files: dict[str, str]) -> Path:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture()
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture()
def tree_writer():
    return write_tree


@pytest.fixture()
def runner_factory():
    return FakeRunner
