"""
Criação do Collector com providers padrão e registro dos hooks do processo
"""
import atexit
import sys
import warnings
from typing import Callable, Iterable, Optional

from .collector import Collector
from .config import CollectorSettings, FailurePolicy
from .masking import Masker, create_masker
from .providers import (
    ErrorProvider,
    InMemoryErrorProvider,
    PlatformServerProvider,
    PythonLanguageProvider,
    RequestProvider,
    ResponseProvider,
    StaticRequestProvider,
    StaticResponseProvider,
)
from .transport import Transport


def create_collector(
    api_key: Optional[str] = None,
    project_id: Optional[str] = None,
    debug: Optional[bool] = None,
    masked_fields: Optional[Iterable[str]] = None,
    settings: Optional[CollectorSettings] = None,
    transport: Optional[Transport] = None,
    request: Optional[RequestProvider] = None,
    response: Optional[ResponseProvider] = None,
    error: Optional[ErrorProvider] = None,
    masker: Optional[Masker] = None,
) -> Collector:
    """
    Monta um Collector com os providers padrão.

    Argumentos explícitos têm precedência sobre as configurações (variáveis
    APM_* ou o CollectorSettings informado).
    """
    settings = settings or CollectorSettings()
    debug = settings.debug if debug is None else debug

    fields = list(settings.masked_fields)
    if masked_fields:
        fields.extend(masked_fields)

    return Collector(
        api_key=api_key if api_key is not None else settings.api_key,
        project_id=project_id if project_id is not None else settings.project_id,
        server=PlatformServerProvider(),
        language=PythonLanguageProvider(),
        request=request if request is not None else StaticRequestProvider(),
        response=response if response is not None else StaticResponseProvider(),
        error=error if error is not None else InMemoryErrorProvider(),
        masker=masker if masker is not None else create_masker(fields, settings.masked_headers),
        policy=FailurePolicy.from_debug(debug),
        transport=transport,
        endpoint=settings.endpoint,
        timeout=settings.timeout,
    )


def install(collector: Collector) -> Callable[[], None]:
    """
    Liga o collector aos hooks do processo: warnings, exceções não tratadas e saída.

    Retorna uma função que desfaz o registro.
    """
    previous_showwarning = warnings.showwarning
    previous_excepthook = sys.excepthook

    def showwarning(message, category, filename, lineno, file=None, line=None):
        collector.on_error(category, str(message), filename, lineno)
        previous_showwarning(message, category, filename, lineno, file, line)

    def excepthook(exc_type, exc, tb):
        collector.on_exception(exc)
        previous_excepthook(exc_type, exc, tb)

    warnings.showwarning = showwarning
    sys.excepthook = excepthook
    atexit.register(collector.on_shutdown)

    def uninstall() -> None:
        warnings.showwarning = previous_showwarning
        sys.excepthook = previous_excepthook
        atexit.unregister(collector.on_shutdown)

    return uninstall
