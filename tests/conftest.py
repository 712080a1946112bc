"""
Fixtures compartilhadas pelos testes.
"""

import httpx
import pytest

from apm_collector.transport import HttpxTransport


@pytest.fixture
def sent_requests():
    """Lista onde o transporte fake registra as requests enviadas."""
    return []


@pytest.fixture
def mock_transport(sent_requests):
    """HttpxTransport apontando para um httpx.MockTransport."""

    def handler(request: httpx.Request) -> httpx.Response:
        sent_requests.append(request)
        return httpx.Response(200, json={"status": "ok"})

    return HttpxTransport(client=httpx.Client(transport=httpx.MockTransport(handler)))
