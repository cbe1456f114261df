from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Set

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

for entry in (BASE_DIR, SRC_DIR):
    if str(entry) not in sys.path:
        sys.path.append(str(entry))

from simplf.utils import DEBUG_PY_TRACE_ENV


@pytest.fixture(autouse=True)
def _plain_error_reports(monkeypatch: pytest.MonkeyPatch) -> None:
    """Runtime error reports never include a Python traceback unless a test opts in."""
    monkeypatch.delenv(DEBUG_PY_TRACE_ENV, raising=False)


def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: List[pytest.Item],
) -> None:
    """Scenario ids double as node ids; a repeated id would hide a case."""
    del session
    del config

    seen: Set[str] = set()
    duplicates = sorted({item.nodeid for item in items if item.nodeid in seen or seen.add(item.nodeid)})

    if duplicates:
        lines = "\n".join(f"- {nodeid}" for nodeid in duplicates)
        raise pytest.UsageError(f"Duplicate pytest nodeids detected during collection:\n{lines}")
