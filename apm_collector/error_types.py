"""
Tradução do tipo de erro recebido pelos hooks para um nome estável
"""
import logging
from enum import Enum
from typing import Any


class ErrorType(str, Enum):
    """Tipos de erro enviados no payload"""

    ERROR = "ERROR"
    CRITICAL = "CRITICAL"
    WARNING = "WARNING"
    USER_WARNING = "USER_WARNING"
    DEPRECATED = "DEPRECATED"
    NOTICE = "NOTICE"
    DEBUG = "DEBUG"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def get(cls, kind: Any) -> str:
        """Retorna o nome do tipo para uma categoria de warning, nível de log ou string"""
        if isinstance(kind, cls):
            return kind.value

        if isinstance(kind, type) and issubclass(kind, Warning):
            if issubclass(kind, (DeprecationWarning, PendingDeprecationWarning, FutureWarning)):
                return cls.DEPRECATED.value
            if issubclass(kind, UserWarning):
                return cls.USER_WARNING.value
            return cls.WARNING.value

        if isinstance(kind, str):
            return kind.upper() if kind else cls.UNKNOWN.value

        if isinstance(kind, int) and not isinstance(kind, bool):
            return _LOG_LEVELS.get(kind, cls.UNKNOWN).value

        return cls.UNKNOWN.value


_LOG_LEVELS = {
    logging.CRITICAL: ErrorType.CRITICAL,
    logging.ERROR: ErrorType.ERROR,
    logging.WARNING: ErrorType.WARNING,
    logging.INFO: ErrorType.NOTICE,
    logging.DEBUG: ErrorType.DEBUG,
}
