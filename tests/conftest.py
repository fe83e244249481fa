from __future__ import annotations

from pathlib import Path

import pytest

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def docs_root() -> Path:
    return DATA_DIR / "docs"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("IMPLVIEW_URL", raising=False)
    monkeypatch.delenv("IMPLVIEW_DOCS_ROOT", raising=False)
