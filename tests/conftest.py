from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest


def _ensure_package_on_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_package_on_path()


@pytest.fixture
def fill_warnings(caplog: pytest.LogCaptureFixture) -> Iterator[pytest.LogCaptureFixture]:
    """Capture warnings emitted by the filler's logger."""

    caplog.set_level(logging.WARNING, logger="structfill.fill")
    yield caplog
