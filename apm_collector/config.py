"""
Configurações do APM Collector
Gerencia credenciais, endpoint de ingestão e regras de mascaramento
"""
import os
from enum import Enum
from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog
import yaml

logger = structlog.get_logger(__name__)

SDK_VERSION = 1.0
SDK_NAME = "python"


class Endpoint(str, Enum):
    """Endpoints de ingestão conhecidos"""

    PUNISHER = "https://rocknrolla.treblle.com"


class FailurePolicy(str, Enum):
    """Política aplicada a cada etapa que pode falhar"""

    SWALLOW = "swallow"
    PROPAGATE = "propagate"

    @classmethod
    def from_debug(cls, debug: bool) -> "FailurePolicy":
        return cls.PROPAGATE if debug else cls.SWALLOW


class CollectorSettings(BaseSettings):
    """Configurações principais do collector"""

    model_config = SettingsConfigDict(env_prefix="APM_", case_sensitive=False)

    # Credenciais
    api_key: str = Field(default="", description="Chave de API do projeto")
    project_id: str = Field(default="", description="Identificador do projeto")
    debug: bool = Field(default=False, description="Propaga falhas em vez de ignorá-las")

    # Configurações de envio
    endpoint: str = Field(default=Endpoint.PUNISHER.value, description="URL de ingestão")
    timeout: float = Field(default=5.0, description="Timeout do envio em segundos")

    # Configurações de logging
    log_level: str = Field(default="INFO", description="Nível de log")
    log_format: str = Field(default="json", description="Formato do log")

    # Configurações de segurança
    masked_fields: List[str] = Field(
        default=[
            "password", "pwd", "secret", "password_confirmation",
            "cc", "card_number", "ccv", "ssn", "credit_score",
        ],
        description="Campos sensíveis mascarados no payload"
    )

    masked_headers: List[str] = Field(
        default=[
            "authorization", "cookie", "set-cookie", "x-api-key",
            "x-auth-token", "x-access-token", "x-refresh-token",
        ],
        description="Headers sensíveis mascarados no payload"
    )

    # Configurações de filtros
    ignored_paths: List[str] = Field(
        default=["/health", "/healthz", "/ready", "/live", "/metrics", "/favicon.ico"],
        description="Paths que não geram payload"
    )

    # Configurações de captura
    body_capture_limit: int = Field(default=65536, description="Bytes do body da response guardados no payload")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level deve ser um de: {valid_levels}')
        return v.upper()

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        if v.lower() not in ('json', 'console'):
            raise ValueError('log_format deve ser json ou console')
        return v.lower()

    @field_validator('timeout')
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError('timeout deve ser maior que zero')
        return v

    @field_validator('body_capture_limit')
    @classmethod
    def validate_body_capture_limit(cls, v):
        if v < 0:
            raise ValueError('body_capture_limit não pode ser negativo')
        return v

    @property
    def failure_policy(self) -> FailurePolicy:
        return FailurePolicy.from_debug(self.debug)


class ConfigManager:
    """Gerenciador de configurações com suporte a arquivos YAML"""

    def __init__(self, config_path: Optional[str] = None):
        self.settings = CollectorSettings()

        if config_path and os.path.exists(config_path):
            self._load_config_file(config_path)

    def _load_config_file(self, config_path: str):
        """Carrega configurações de arquivo YAML"""
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}

            if not isinstance(config_data, dict):
                raise ValueError('arquivo de configuração deve conter um mapeamento')

            overrides = config_data.get('collector') or {}
            known = {key: value for key, value in overrides.items() if key in CollectorSettings.model_fields}
            if known:
                self.settings = CollectorSettings(**{**self.settings.model_dump(), **known})

        except (OSError, yaml.YAMLError, ValueError) as e:
            # Continua com configurações padrão
            logger.warning("Erro ao carregar arquivo de configuração", path=config_path, error=str(e))

    def should_ignore_path(self, path: str) -> bool:
        """Verifica se um path não deve ser coletado"""
        import fnmatch

        for ignored_path in self.settings.ignored_paths:
            if fnmatch.fnmatch(path, ignored_path):
                return True

        return False


def load_config(config_path: Optional[str] = None) -> ConfigManager:
    """Cria o gerenciador a partir de APM_CONFIG_PATH quando nenhum caminho é informado"""
    return ConfigManager(config_path=config_path or os.getenv('APM_CONFIG_PATH'))
