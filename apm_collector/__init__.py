"""
APM Collector

Coleta informações da request/response, do ambiente de execução e dos erros
ocorridos, mascara dados sensíveis e envia um payload JSON para o endpoint de
ingestão ao final do processamento.
"""

__version__ = "1.0.0"
__description__ = "Application performance monitoring data collector"

from .config import CollectorSettings, ConfigManager, Endpoint, FailurePolicy, load_config
from .collector import Collector
from .error_types import ErrorType
from .exceptions import CollectorError, TransportError
from .factory import create_collector, install
from .logging_config import configure_logging
from .masking import FieldMasker, Masker, create_masker
from .models import Data, Error
from .providers import (
    ErrorProvider,
    InMemoryErrorProvider,
    LanguageProvider,
    PlatformServerProvider,
    PythonLanguageProvider,
    RequestProvider,
    ResponseProvider,
    ServerProvider,
    StaticRequestProvider,
    StaticResponseProvider,
)
from .transport import HttpxTransport, Transport, discover_transport

__all__ = [
    'CollectorSettings',
    'ConfigManager',
    'Endpoint',
    'FailurePolicy',
    'load_config',
    'Collector',
    'ErrorType',
    'CollectorError',
    'TransportError',
    'create_collector',
    'install',
    'configure_logging',
    'FieldMasker',
    'Masker',
    'create_masker',
    'Data',
    'Error',
    'ErrorProvider',
    'InMemoryErrorProvider',
    'LanguageProvider',
    'PlatformServerProvider',
    'PythonLanguageProvider',
    'RequestProvider',
    'ResponseProvider',
    'ServerProvider',
    'StaticRequestProvider',
    'StaticResponseProvider',
    'HttpxTransport',
    'Transport',
    'discover_transport',
]
