#!/usr/bin/env python3
"""
Testes de integração do middleware ASGI.

Este módulo testa o fluxo completo:
1. Request recebida por uma aplicação FastAPI
2. Coleta de request/response/erros pelo middleware
3. Mascaramento dos dados sensíveis
4. Envio de um único payload para o endpoint de ingestão (httpx.MockTransport)
"""

import json

import pytest
from fastapi import FastAPI, HTTPException, Response
from fastapi.responses import StreamingResponse
from fastapi.testclient import TestClient

from apm_collector.config import CollectorSettings, ConfigManager
from apm_collector.integrations import CollectorMiddleware


@pytest.fixture
def app(mock_transport):
    """Aplicação de teste com o middleware instalado."""
    application = FastAPI()

    @application.get("/users/{user_id}")
    async def get_user(user_id: int):
        return {"id": user_id, "name": "João Silva"}

    @application.post("/login")
    async def login(payload: dict):
        return {"user": payload["username"], "token": "abc"}

    @application.get("/missing")
    async def missing():
        raise HTTPException(status_code=404, detail="não encontrado")

    @application.get("/boom")
    async def boom():
        raise RuntimeError("falha na view")

    @application.get("/cookies")
    async def cookies(response: Response):
        response.set_cookie("a", "1")
        response.set_cookie("b", "2")
        return {"ok": True}

    @application.get("/stream")
    async def stream():
        async def chunks():
            yield b"parte-1\n"
            yield b"parte-2\n"

        return StreamingResponse(chunks(), media_type="text/plain")

    @application.get("/health")
    async def health():
        return {"status": "healthy"}

    config = ConfigManager()
    config.settings = CollectorSettings(api_key="key-123", project_id="project-1")
    application.add_middleware(CollectorMiddleware, config=config, transport=mock_transport)
    return application


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


def sent_payloads(sent_requests):
    return [json.loads(request.content) for request in sent_requests]


class TestCollectorMiddleware:
    """Testes para CollectorMiddleware."""

    def test_sends_one_payload_per_request(self, client, sent_requests):
        """Testa que cada request gera exatamente um POST."""
        response = client.get("/users/7", headers={"user-agent": "pytest"})

        assert response.status_code == 200
        assert response.json() == {"id": 7, "name": "João Silva"}
        assert len(sent_requests) == 1

        request = sent_requests[0]
        assert request.method == "POST"
        assert request.headers["x-api-key"] == "key-123"
        assert request.headers["content-type"] == "application/json"

        payload = sent_payloads(sent_requests)[0]
        assert payload["api_key"] == "key-123"
        assert payload["project_id"] == "project-1"
        assert payload["sdk"] == "python"

        data = payload["data"]
        assert data["request"]["method"] == "GET"
        assert data["request"]["url"].endswith("/users/7")
        assert data["request"]["user_agent"] == "pytest"
        assert data["response"]["code"] == 200
        assert data["response"]["body"] == {"id": 7, "name": "João Silva"}
        assert data["response"]["size"] == len(response.content)
        assert data["language"]["name"] == "python"
        assert data["errors"] == []

    def test_masks_sensitive_data(self, client, sent_requests):
        """Testa que senha e authorization não saem da aplicação."""
        response = client.post(
            "/login",
            json={"username": "joao", "password": "segredo"},
            headers={"Authorization": "Bearer abc.def"},
        )

        assert response.status_code == 200

        data = sent_payloads(sent_requests)[0]["data"]
        assert data["request"]["body"] == {"username": "joao", "password": "*******"}
        assert data["request"]["headers"]["authorization"] == "*" * len("Bearer abc.def")
        assert "segredo" not in sent_requests[0].content.decode("utf-8")

    def test_http_errors_are_reported_as_response(self, client, sent_requests):
        """Testa que HTTPException aparece apenas como status da response."""
        response = client.get("/missing")

        assert response.status_code == 404

        data = sent_payloads(sent_requests)[0]["data"]
        assert data["response"]["code"] == 404
        assert data["errors"] == []

    def test_unhandled_exception_is_recorded(self, client, sent_requests):
        """Testa que exceções da view são registradas e a aplicação responde 500."""
        response = client.get("/boom")

        assert response.status_code == 500
        assert len(sent_requests) == 1

        data = sent_payloads(sent_requests)[0]["data"]
        assert data["response"]["code"] == 500
        assert len(data["errors"]) == 1
        assert data["errors"][0]["source"] == "onException"
        assert data["errors"][0]["type"] == "ERROR"
        assert data["errors"][0]["message"] == "falha na view"
        assert data["errors"][0]["file"].endswith("test_asgi_flow.py")

    def test_ignored_paths_are_not_collected(self, client, sent_requests):
        """Testa que paths ignorados não geram payload."""
        response = client.get("/health")

        assert response.status_code == 200
        assert sent_requests == []

    def test_ingestion_failure_does_not_break_request(self, client, mock_transport, sent_requests, monkeypatch):
        """Testa que falha no envio não afeta a resposta da aplicação."""

        def failing_send(request):
            raise ConnectionError("endpoint indisponível")

        monkeypatch.setattr(mock_transport, "send", failing_send)

        response = client.get("/users/2")

        assert response.status_code == 200
        assert response.json() == {"id": 2, "name": "João Silva"}
        assert sent_requests == []

    def test_repeated_headers_reach_the_client(self, client, sent_requests):
        """Testa que headers repetidos (set-cookie) não são colapsados."""
        response = client.get("/cookies")

        assert response.status_code == 200
        cookies = response.headers.get_list("set-cookie")
        assert len(cookies) == 2
        assert cookies[0].startswith("a=1")
        assert cookies[1].startswith("b=2")

        data = sent_payloads(sent_requests)[0]["data"]
        assert data["response"]["code"] == 200
        assert data["response"]["body"] == {"ok": True}

    def test_streaming_response_is_passed_through(self, client, sent_requests):
        """Testa que respostas em stream chegam inteiras e são medidas ao final."""
        response = client.get("/stream")

        assert response.status_code == 200
        assert response.text == "parte-1\nparte-2\n"
        assert response.headers["content-type"].startswith("text/plain")
        assert len(sent_requests) == 1

        data = sent_payloads(sent_requests)[0]["data"]
        assert data["response"]["size"] == len("parte-1\nparte-2\n")
        assert data["response"]["body"] == "parte-1\nparte-2\n"
        assert data["response"]["headers"]["content-type"].startswith("text/plain")
