"""
Collector principal
Coleta os snapshots dos providers, monta o payload, mascara e envia para o endpoint de ingestão
"""
import json
import traceback
from typing import Any, Dict, Iterable, Optional
import structlog

from .config import SDK_NAME, SDK_VERSION, Endpoint, FailurePolicy
from .error_types import ErrorType
from .masking import Masker
from .metrics import ERRORS_CAPTURED, PAYLOAD_FAILURES, PAYLOADS_SENT, SEND_TIME
from .models import Data, Error
from .providers import ErrorProvider, LanguageProvider, RequestProvider, ResponseProvider, ServerProvider
from .transport import Transport, discover_transport

logger = structlog.get_logger(__name__)


class Collector:
    """
    Orquestra a coleta de uma request.

    Os hooks on_error/on_exception acumulam erros no ErrorProvider; on_shutdown
    monta um único payload, passa pelo Masker e faz um único POST pelo Transport.
    Cada etapa que pode falhar segue a FailurePolicy: SWALLOW registra em log e
    segue em frente, PROPAGATE relança a exceção original.
    """

    def __init__(
        self,
        api_key: str,
        project_id: str,
        server: ServerProvider,
        language: LanguageProvider,
        request: RequestProvider,
        response: ResponseProvider,
        error: ErrorProvider,
        masker: Masker,
        policy: FailurePolicy = FailurePolicy.SWALLOW,
        transport: Optional[Transport] = None,
        endpoint: str = Endpoint.PUNISHER.value,
        timeout: float = 5.0,
    ):
        self._api_key = api_key
        self._project_id = project_id
        self.server = server
        self.language = language
        self.request = request
        self.response = response
        self.error = error
        self.masker = masker
        self.policy = policy
        self.endpoint = endpoint
        self.transport = transport if transport is not None else discover_transport(timeout=timeout)

    @property
    def debug(self) -> bool:
        return self.policy is FailurePolicy.PROPAGATE

    def on_error(self, kind: Any, message: str, file: str, line: int) -> None:
        """Registra um erro/warning reportado pela aplicação"""
        try:
            self.error.add(
                Error(
                    source='onError',
                    type=ErrorType.get(kind),
                    message=str(message),
                    file=file,
                    line=line,
                )
            )
            ERRORS_CAPTURED.labels(source='onError').inc()
        except Exception as e:
            self._handle_failure('on_error', e)

    def on_exception(self, exception: BaseException) -> None:
        """Registra uma exceção não tratada"""
        try:
            file, line = _exception_location(exception)
            self.error.add(
                Error(
                    source='onException',
                    type=ErrorType.ERROR.value,
                    message=str(exception),
                    file=file,
                    line=line,
                )
            )
            ERRORS_CAPTURED.labels(source='onException').inc()
        except Exception as e:
            self._handle_failure('on_exception', e)

    def build_payload(self) -> Dict[str, Any]:
        """Monta o payload com credenciais, metadados do SDK e snapshots"""
        try:
            return {
                'api_key': self._api_key,
                'project_id': self._project_id,
                'version': SDK_VERSION,
                'sdk': SDK_NAME,
                'data': Data(
                    server=self.server.get(),
                    language=self.language.get(),
                    request=self.request.get(),
                    response=self.response.get(),
                    errors=self.error.get(),
                ).to_dict(),
            }
        except Exception as e:
            self._handle_failure('build_payload', e)

        return {}

    def fallback_payload(self) -> Dict[str, Any]:
        """Payload mínimo enviado quando não é possível serializar o payload completo"""
        return {
            'api_key': self._api_key,
            'project_id': self._project_id,
            'version': SDK_VERSION,
            'sdk': SDK_NAME,
            'data': Data().to_dict(),
        }

    def on_shutdown(self) -> None:
        """Mascara, serializa e envia o payload da request"""
        payload = None

        try:
            masked = self.masker.mask(self.build_payload())
        except Exception as e:
            self._handle_failure('mask', e)
        else:
            try:
                # NaN/Infinity não são JSON válido
                payload = json.dumps(masked, allow_nan=False)
            except Exception as e:
                self._handle_failure('serialize', e)

        if payload is None:
            payload = json.dumps(self.fallback_payload(), allow_nan=False)

        try:
            request = self.transport.create_request(
                'POST',
                self.endpoint,
                headers={
                    'Content-Type': 'application/json',
                    'x-api-key': self._api_key,
                },
                stream=self.create_stream(payload),
            )

            with SEND_TIME.time():
                response = self.transport.send(request)

            PAYLOADS_SENT.inc()
            logger.debug("Payload enviado", endpoint=self.endpoint, status=getattr(response, 'status_code', None))

        except Exception as e:
            self._handle_failure('send', e)

    def create_stream(self, body: str) -> Iterable[bytes]:
        return self.transport.create_stream(body)

    def set_transport(self, transport: Transport) -> "Collector":
        self.transport = transport
        return self

    def _handle_failure(self, step: str, error: Exception) -> None:
        if self.policy is FailurePolicy.PROPAGATE:
            raise error

        PAYLOAD_FAILURES.labels(step=step).inc()
        logger.warning("Falha ignorada no collector", step=step, error=str(error), error_type=type(error).__name__)


def _exception_location(exception: BaseException):
    frames = traceback.extract_tb(exception.__traceback__) if exception.__traceback__ else []
    if not frames:
        return '', 0
    last = frames[-1]
    return last.filename, last.lineno or 0
