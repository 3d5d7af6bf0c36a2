from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from objcatalog import PythonTypeFactory  # noqa: E402
from objcatalog.settings import ENV_PREFIX  # noqa: E402


@pytest.fixture
def type_factory() -> PythonTypeFactory:
    return PythonTypeFactory()


@pytest.fixture(autouse=True)
def _clean_catalog_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
