"""
Exceções do APM Collector
"""
from typing import Optional


class CollectorError(Exception):
    """Erro base do collector"""


class TransportError(CollectorError):
    """Falha ao enviar o payload para o endpoint de ingestão"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
