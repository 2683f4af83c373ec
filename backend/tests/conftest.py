"""Shared fixtures for backend tests."""

from __future__ import annotations

import pytest


@pytest.fixture
def fresh_runtime(monkeypatch: pytest.MonkeyPatch):
    """Reset runtime singletons with instant settlement and a slow heartbeat."""
    monkeypatch.setenv("BANK_SETTLEMENT_DELAY_SECONDS", "0")
    monkeypatch.setenv("BANK_HEARTBEAT_INTERVAL_SECONDS", "600")
    monkeypatch.setenv("BANK_HEARTBEAT_PONG_TIMEOUT_SECONDS", "300")

    import app.runtime as runtime

    runtime.startup()
    yield runtime
    runtime.startup()
