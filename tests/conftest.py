"""
Shared fixtures.

Every test starts from the seed data with zero artificial latency, no
Pinata credentials, no Solana RPC endpoint and no snapshot file.
"""

import os
import sys

import httpx
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from medchain import store
from medchain.ledger import ipfs, latency, solana
from medchain.notifications import NotificationService


@pytest.fixture(autouse=True)
def demo_mode(monkeypatch):
    monkeypatch.setattr(latency, "LATENCY_SCALE", 0.0)
    monkeypatch.setattr(ipfs, "PINATA_API_KEY", "")
    monkeypatch.setattr(ipfs, "PINATA_SECRET_KEY", "")
    monkeypatch.setattr(solana, "SOLANA_RPC_URL", "")
    monkeypatch.setattr(store, "STORE_PATH", None)
    store.reset()
    NotificationService.reset()
    yield
    NotificationService.reset()


@pytest.fixture
def pinata(monkeypatch):
    """Switch IPFS calls to 'real' Pinata mode."""
    monkeypatch.setattr(ipfs, "PINATA_API_KEY", "test-key")
    monkeypatch.setattr(ipfs, "PINATA_SECRET_KEY", "test-secret")


@pytest.fixture
def mock_http(monkeypatch):
    """Route every httpx.AsyncClient through a handler function.

    Usage: mock_http(lambda request: httpx.Response(200, json={...}))
    Returns the list of requests seen.
    """
    real_client = httpx.AsyncClient
    seen: list[httpx.Request] = []

    def install(handler):
        def recording_handler(request):
            seen.append(request)
            return handler(request)

        transport = httpx.MockTransport(recording_handler)

        def factory(*args, **kwargs):
            kwargs["transport"] = transport
            return real_client(*args, **kwargs)

        monkeypatch.setattr(httpx, "AsyncClient", factory)
        return seen

    return install


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from medchain.main import app

    return TestClient(app)
