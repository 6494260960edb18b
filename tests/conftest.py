"""Shared pytest fixtures."""
import time
import pytest


@pytest.fixture
def eastern_timezone(monkeypatch):
    """Run the test with US Eastern local time (DST ends 2025-11-02 02:00)."""
    if not hasattr(time, 'tzset'):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv('TZ', 'EST5EDT,M3.2.0,M11.1.0')
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
