"""
Objetos de dados do payload
"""
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class Error:
    """
    Registro de um erro capturado durante a request.

    Attributes:
        source: Hook que gerou o registro (onError ou onException)
        type: Nome do tipo de erro, ver ErrorType
        message: Mensagem completa do erro
        file: Arquivo onde o erro ocorreu
        line: Linha onde o erro ocorreu
    """
    source: str
    type: str
    message: str
    file: str
    line: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Data:
    """Agregado dos snapshots de todos os providers"""
    server: Dict[str, Any] = field(default_factory=dict)
    language: Dict[str, Any] = field(default_factory=dict)
    request: Dict[str, Any] = field(default_factory=dict)
    response: Dict[str, Any] = field(default_factory=dict)
    errors: List[Any] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'server': dict(self.server),
            'language': dict(self.language),
            'request': dict(self.request),
            'response': dict(self.response),
            'errors': [
                error.to_dict() if isinstance(error, Error) else dict(error)
                for error in self.errors
            ],
        }
