"""
Integração com aplicações ASGI (Starlette/FastAPI)
Cria um Collector por request e envia o payload ao final do processamento
"""
import json
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Optional
from starlette.background import BackgroundTask
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import StreamingResponse
from fastapi.concurrency import run_in_threadpool

from ..config import CollectorSettings, ConfigManager, load_config
from ..factory import create_collector
from ..providers import InMemoryErrorProvider, StaticResponseProvider
from ..transport import Transport, discover_transport


def _decode_body(content: bytes) -> Any:
    if not content:
        return None
    text = content.decode('utf-8', errors='replace')
    try:
        return json.loads(text)
    except ValueError:
        return text


def _headers_snapshot(headers) -> Dict[str, str]:
    """Headers como dicionário; valores repetidos são unidos por vírgula"""
    snapshot: Dict[str, str] = {}
    for key, value in headers.items():
        snapshot[key] = f"{snapshot[key]}, {value}" if key in snapshot else value
    return snapshot


class AsgiRequestProvider:
    """Snapshot da request recebida pela aplicação"""

    def __init__(self, request: Request, body: bytes = b""):
        self.timestamp = datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')
        self.request = request
        self.body = body

    def get(self) -> Dict[str, Any]:
        headers = _headers_snapshot(self.request.headers)
        return {
            'timestamp': self.timestamp,
            'ip': self.request.client.host if self.request.client else '',
            'url': str(self.request.url),
            'user_agent': headers.get('user-agent', ''),
            'method': self.request.method,
            'headers': headers,
            'body': _decode_body(self.body),
            'raw': _decode_body(self.body),
        }


class AsgiResponseProvider(StaticResponseProvider):
    """Snapshot da response produzida pela aplicação, alimentado enquanto o body é transmitido"""

    def __init__(self, capture_limit: int = 65536, started_at: Optional[float] = None):
        super().__init__(started_at=started_at)
        self.capture_limit = capture_limit
        self._captured = bytearray()
        self._streamed = 0

    def start(self, code: int, headers: Dict[str, str]):
        self.code = code
        self.headers = headers

    def feed(self, chunk: bytes):
        self._streamed += len(chunk)
        room = self.capture_limit - len(self._captured)
        if room > 0:
            self._captured.extend(chunk[:room])

    def close(self):
        """Congela o snapshot quando o stream termina"""
        content = bytes(self._captured)
        if self._streamed > len(content):
            # Body truncado: guarda apenas o prefixo como texto
            body = content.decode('utf-8', errors='replace')
        else:
            body = _decode_body(content)
        self.finish(self.code, self.headers, body, size=self._streamed)


class CollectorMiddleware(BaseHTTPMiddleware):
    """Middleware que coleta cada request e envia o payload em background"""

    def __init__(
        self,
        app,
        settings: Optional[CollectorSettings] = None,
        config: Optional[ConfigManager] = None,
        transport: Optional[Transport] = None,
    ):
        super().__init__(app)
        self.config = config or load_config()
        if settings is not None:
            self.config.settings = settings
        self.transport = transport or discover_transport(timeout=self.config.settings.timeout)

    async def dispatch(self, request: Request, call_next):
        if self.config.should_ignore_path(request.url.path):
            return await call_next(request)

        body = await request.body()
        response_provider = AsgiResponseProvider(capture_limit=self.config.settings.body_capture_limit)
        collector = create_collector(
            settings=self.config.settings,
            transport=self.transport,
            request=AsgiRequestProvider(request, body),
            response=response_provider,
            error=InMemoryErrorProvider(),
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            collector.on_exception(exc)
            response_provider.finish(500)
            await run_in_threadpool(collector.on_shutdown)
            raise

        response_provider.start(response.status_code, _headers_snapshot(response.headers))

        streamed = StreamingResponse(
            _observe(response.body_iterator, response_provider),
            status_code=response.status_code,
            background=BackgroundTask(collector.on_shutdown),
        )
        # Headers repetidos (set-cookie) seguem exatamente como a aplicação enviou
        streamed.raw_headers = response.raw_headers
        return streamed


async def _observe(body_iterator: AsyncIterator[bytes], provider: AsgiResponseProvider) -> AsyncIterator[bytes]:
    try:
        async for chunk in body_iterator:
            provider.feed(chunk)
            yield chunk
    finally:
        provider.close()
