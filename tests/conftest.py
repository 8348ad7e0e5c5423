"""Pytest configuration and fixtures."""

import os
from datetime import datetime, timedelta, timezone

# Set test environment variables BEFORE importing app modules
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from app.core import clock
from app.core.rate_limit import limiter
from app.api.deps import get_connected_users_service
from app.services.connected_users_service import (
    ConnectedUsersService,
    connected_users_service,
)
from main import app

# Rate limits are slowapi's concern, not these tests'
limiter.enabled = False

FIXED_NOW = datetime(2026, 3, 10, 14, 30, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Stand-in for clock.utcnow that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def frozen_clock(monkeypatch):
    """Pin the wall clock used by presence and dashboard formatting."""
    frozen = FrozenClock(FIXED_NOW)
    monkeypatch.setattr(clock, "utcnow", frozen)
    return frozen


@pytest.fixture
def presence_service(frozen_clock):
    """A fresh, empty presence registry for each test."""
    return ConnectedUsersService(cleanup_minutes=30)


@pytest.fixture(scope="function")
def client(presence_service):
    """Create a test client wired to the per-test registry."""
    app.dependency_overrides[get_connected_users_service] = lambda: presence_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    connected_users_service.clear()


@pytest.fixture
def sample_records():
    """Processing records spread over the last few days."""
    return [
        {
            "file_name": "AIT-2026-0001.pdf",
            "document_type": "autuacao",
            "confidence": 0.97,
            "processed_at": (FIXED_NOW - timedelta(seconds=30)).isoformat(),
            "status": "completed",
        },
        {
            "file_name": "defesa_joao.PDF",
            "document_type": "defesa",
            "confidence": 0.88,
            "processed_at": (FIXED_NOW - timedelta(minutes=5)).isoformat(),
            "status": "completed",
        },
        {
            "file_name": "scan_0042.jpg",
            "document_type": "autuacao",
            "confidence": 0.41,
            "processed_at": (FIXED_NOW - timedelta(hours=3)).isoformat(),
            "status": "failed",
            "error_message": "Low OCR confidence",
        },
        {
            "file_name": "nip_lote.pdf",
            "document_type": "notificacao_penalidade",
            "confidence": 0.0,
            "processed_at": (FIXED_NOW - timedelta(days=2)).isoformat(),
            "status": "processing",
        },
    ]
