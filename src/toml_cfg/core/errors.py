# src/toml_cfg/core/errors.py
"""
Exceções canônicas da resolução de configuração do toml-cfg.

Este módulo define a hierarquia oficial de exceções utilizadas durante
a validação do schema declarado, o modo estrito e a reconciliação de
tipos entre overrides e campos.

As exceções aqui definidas representam **falhas fatais**. Condições não
fatais (raiz não encontrada, arquivo ausente, componente ausente) nunca
levantam exceção fora do modo estrito: elas apenas restringem a fonte de
verdade aos defaults.

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - Toda exceção carrega dados estruturados em `details`
    - Mensagens são curtas e direcionadas ao autor do schema ou do override

Invariantes:
    - Todas as exceções herdam de `TomlCfgError`
    - Toda exceção possui um código estável no catálogo de tipos

Limites explícitos:
    - Não realiza fallback ou recovery
    - Não registra eventos de rastreabilidade
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro
# ---------------------------------------------------------------------------

STRICT_OVERRIDE_SOURCE_MISSING = "STRICT_OVERRIDE_SOURCE_MISSING"
TYPE_KIND_MISMATCH = "TYPE_KIND_MISMATCH"
MISSING_DEFAULT = "MISSING_DEFAULT"
SCHEMA_DEFINITION_ERROR = "SCHEMA_DEFINITION_ERROR"


@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class TomlCfgError(Exception):
    """
    Exceção base do toml-cfg.

    Todas as falhas fatais da resolução herdam desta classe, permitindo
    captura genérica pelo pipeline de build e mapeamento determinístico
    para `ErrorPayload`.
    """

    code = "TOML_CFG_ERROR"

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})
        self.hint = hint

    def to_payload(self) -> ErrorPayload:
        return ErrorPayload(
            type=self.code,
            message=self.message,
            details=dict(self.details),
            hint=self.hint,
        )


class StrictModeViolationError(TomlCfgError):
    """
    Modo estrito ativo, mas nenhuma tabela de overrides do componente foi obtida.

    `details["stage"]` indica o primeiro estágio que falhou:
    `root_not_found`, `file_missing`, `parse_failed` ou `component_missing`.
    """

    code = STRICT_OVERRIDE_SOURCE_MISSING


class TypeKindMismatchError(TomlCfgError):
    """
    Literal de override incompatível com o tipo declarado do campo.

    Sempre fatal e restrito a um campo: `details` contém `field`,
    `expected` e `literal`.
    """

    code = TYPE_KIND_MISMATCH


class MissingDefaultError(TomlCfgError):
    """Campo declarado sem default."""

    code = MISSING_DEFAULT


class SchemaDefinitionError(TomlCfgError):
    """Schema estruturalmente inválido (nomes duplicados, default incompatível, etc.)."""

    code = SCHEMA_DEFINITION_ERROR
