"""
Transporte HTTP do payload
Envolve o httpx.Client atrás de um contrato mínimo de envio
"""
from functools import lru_cache
from typing import Dict, Iterable, Optional, Protocol, runtime_checkable
import httpx
import structlog

from .exceptions import TransportError

logger = structlog.get_logger(__name__)


@runtime_checkable
class Transport(Protocol):
    def create_stream(self, content: str) -> Iterable[bytes]: ...

    def create_request(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        stream: Iterable[bytes],
    ) -> httpx.Request: ...

    def send(self, request: httpx.Request) -> httpx.Response: ...


class HttpxTransport:
    """Transporte padrão baseado em httpx.Client"""

    def __init__(self, timeout: float = 5.0, client: Optional[httpx.Client] = None):
        self.timeout = timeout
        self.client = client or httpx.Client(timeout=httpx.Timeout(timeout))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Fecha o cliente HTTP"""
        self.client.close()

    def create_stream(self, content: str) -> httpx.ByteStream:
        return httpx.ByteStream(content.encode('utf-8'))

    def create_request(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        stream: Iterable[bytes],
    ) -> httpx.Request:
        return self.client.build_request(method, url, headers=headers, content=b"".join(stream))

    def send(self, request: httpx.Request) -> httpx.Response:
        try:
            response = self.client.send(request)
        except httpx.HTTPError as e:
            raise TransportError(f"Erro de conexão: {e}") from e

        if response.is_error:
            logger.warning(
                "Endpoint de ingestão respondeu com erro",
                status=response.status_code,
                url=str(request.url)
            )

        return response


def discover_transport(timeout: float = 5.0) -> Transport:
    """Seleciona a implementação padrão de transporte, compartilhada por timeout"""
    return _default_transport(float(timeout))


@lru_cache(maxsize=None)
def _default_transport(timeout: float) -> HttpxTransport:
    return HttpxTransport(timeout=timeout)
