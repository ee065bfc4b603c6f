from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def default_conf() -> Path:
    return ROOT / "default.conf"
