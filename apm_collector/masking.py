"""
Módulo de mascaramento de dados sensíveis
Substitui valores confidenciais do payload antes do envio
"""
import re
from typing import Any, Dict, Iterable, Optional, Protocol, runtime_checkable


@runtime_checkable
class Masker(Protocol):
    def mask(self, data: Any) -> Any: ...


class FieldMasker:
    """Mascarador recursivo baseado em nomes de campos, headers e padrões"""

    # Padrões regex para identificar dados sensíveis em valores livres
    SENSITIVE_PATTERNS = {
        'credit_card': r'\b(?:\d{4}[-\s]?){3}\d{4}\b',
        'amex': r'\b3[47]\d{2}[-\s]?\d{6}[-\s]?\d{5}\b',
    }

    def __init__(self, masked_fields: Iterable[str], masked_headers: Optional[Iterable[str]] = None):
        self.masked_fields = {f.lower() for f in masked_fields}
        self.masked_headers = {h.lower() for h in (masked_headers or [])}

        # Compilar padrões regex para melhor performance
        self.compiled_patterns = {
            name: re.compile(pattern)
            for name, pattern in self.SENSITIVE_PATTERNS.items()
        }

    def mask(self, data: Any) -> Any:
        """Retorna uma cópia de data com os valores sensíveis mascarados"""
        return self._mask_recursive(data)

    def mask_headers(self, headers: Dict[str, Any]) -> Dict[str, Any]:
        """Mascara headers sensíveis"""
        masked = {}

        for key, value in headers.items():
            if str(key).lower() in self.masked_headers:
                masked[key] = self._stars(value)
            else:
                masked[key] = self._mask_recursive(value)

        return masked

    def _mask_recursive(self, data: Any) -> Any:
        if isinstance(data, dict):
            masked = {}
            for key, value in data.items():
                key_lower = str(key).lower()

                if key_lower in self.masked_fields:
                    masked[key] = self._stars(value)
                elif key_lower == 'headers' and isinstance(value, dict):
                    masked[key] = self.mask_headers(value)
                else:
                    masked[key] = self._mask_recursive(value)
            return masked

        elif isinstance(data, (list, tuple)):
            return [self._mask_recursive(item) for item in data]

        elif isinstance(data, str):
            return self._mask_string_value(data)

        else:
            return data

    def _mask_string_value(self, value: str) -> str:
        """Mascara trechos da string que casam com os padrões"""
        masked_value = value

        for compiled_pattern in self.compiled_patterns.values():
            masked_value = compiled_pattern.sub(lambda m: '*' * len(m.group(0)), masked_value)

        return masked_value

    def _stars(self, value: Any) -> Any:
        if isinstance(value, (dict, list)):
            # Estruturas inteiras sob uma chave sensível são mascaradas valor a valor
            return self._mask_nested(value)
        if value is None:
            return None
        return '*' * len(str(value))

    def _mask_nested(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {k: self._mask_nested(v) for k, v in value.items()}
        if isinstance(value, list):
            return [self._mask_nested(v) for v in value]
        return self._stars(value)


def create_masker(masked_fields: Iterable[str], masked_headers: Optional[Iterable[str]] = None) -> FieldMasker:
    """Factory function para criar mascarador"""
    return FieldMasker(masked_fields, masked_headers)
