"""
Providers de snapshots consumidos pelo Collector
Cada provider expõe o estado atual de um domínio como um dicionário simples
"""
import locale
import os
import platform
import socket
import sys
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from .models import Error


@runtime_checkable
class ServerProvider(Protocol):
    def get(self) -> Dict[str, Any]: ...


@runtime_checkable
class LanguageProvider(Protocol):
    def get(self) -> Dict[str, Any]: ...


@runtime_checkable
class RequestProvider(Protocol):
    def get(self) -> Dict[str, Any]: ...


@runtime_checkable
class ResponseProvider(Protocol):
    def get(self) -> Dict[str, Any]: ...


@runtime_checkable
class ErrorProvider(Protocol):
    def add(self, error: Error) -> None: ...

    def get(self) -> List[Dict[str, Any]]: ...


class PlatformServerProvider:
    """Snapshot do servidor a partir de platform, socket e locale"""

    def __init__(self, software: Optional[str] = None, protocol: Optional[str] = None):
        self.software = software
        self.protocol = protocol

    def get(self) -> Dict[str, Any]:
        return {
            'ip': self._resolve_ip(),
            'timezone': datetime.now(timezone.utc).astimezone().tzname() or time.tzname[0],
            'software': self.software or os.getenv('SERVER_SOFTWARE') or f"Python/{platform.python_version()}",
            'signature': os.getenv('SERVER_SIGNATURE', ''),
            'protocol': self.protocol or os.getenv('SERVER_PROTOCOL', ''),
            'os': {
                'name': platform.system(),
                'release': platform.release(),
                'architecture': platform.machine(),
            },
            'encoding': locale.getpreferredencoding(False),
        }

    @staticmethod
    def _resolve_ip() -> str:
        try:
            return socket.gethostbyname(socket.gethostname())
        except OSError:
            return 'bogon'


class PythonLanguageProvider:
    """Snapshot do interpretador Python"""

    def get(self) -> Dict[str, Any]:
        return {
            'name': 'python',
            'version': platform.python_version(),
            'implementation': platform.python_implementation(),
            'executable': sys.executable,
        }


class InMemoryErrorProvider:
    """Acumula os erros de uma request em memória"""

    def __init__(self):
        self._errors: List[Error] = []

    def add(self, error: Error) -> None:
        self._errors.append(error)

    def get(self) -> List[Dict[str, Any]]:
        return [error.to_dict() for error in self._errors]


class StaticRequestProvider:
    """Request preenchida manualmente pela aplicação (scripts, workers)"""

    def __init__(
        self,
        method: str = '',
        url: str = '',
        headers: Optional[Dict[str, str]] = None,
        body: Any = None,
        ip: str = '',
        user_agent: str = '',
        raw: Any = None,
    ):
        self.timestamp = datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')
        self.method = method
        self.url = url
        self.headers = dict(headers or {})
        self.body = body
        self.ip = ip
        self.user_agent = user_agent or self.headers.get('user-agent', '')
        self.raw = raw

    def get(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp,
            'ip': self.ip,
            'url': self.url,
            'user_agent': self.user_agent,
            'method': self.method,
            'headers': dict(self.headers),
            'body': self.body,
            'raw': self.raw,
        }


class StaticResponseProvider:
    """Response preenchida manualmente; load_time medido desde a criação"""

    def __init__(self, started_at: Optional[float] = None):
        self.started_at = started_at if started_at is not None else time.perf_counter()
        self.code = 200
        self.headers: Dict[str, str] = {}
        self.body: Any = None
        self.size = 0
        self.load_time: Optional[float] = None

    def finish(self, code: int, headers: Optional[Dict[str, str]] = None, body: Any = None, size: Optional[int] = None):
        """Registra o resultado da request e congela o load_time"""
        self.code = code
        self.headers = dict(headers or {})
        self.body = body
        self.size = size if size is not None else len(str(body).encode('utf-8')) if body is not None else 0
        self.load_time = time.perf_counter() - self.started_at

    def get(self) -> Dict[str, Any]:
        load_time = self.load_time if self.load_time is not None else time.perf_counter() - self.started_at
        return {
            'headers': dict(self.headers),
            'code': self.code,
            'size': self.size,
            'load_time': round(load_time * 1000, 4),
            'body': self.body,
        }
