from __future__ import annotations

import pytest
import structlog
from structlog.testing import capture_logs

from gqlerr.config import get_settings


@pytest.fixture(autouse=True)
def _reset_configuration(monkeypatch):
    monkeypatch.delenv("GQLERR_DEVELOPMENT", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()


@pytest.fixture
def logs():
    with capture_logs() as captured:
        yield captured
