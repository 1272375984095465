# src/toml_cfg/core/types.py
"""
Tipos canônicos do schema e da configuração resolvida do toml-cfg.

Este módulo define as estruturas que padronizam a comunicação entre o
schema declarado por uma biblioteca, o motor de resolução e o
colaborador de emissão.

Componentes principais:
    - ScalarKind     → enum de tipos escalares suportados
    - Scalar         → classificação explícita de campo escalar
    - NamedVariant   → classificação explícita de campo enumerado
    - LiteralExpr    → expressão literal (valor concreto)
    - VariantRef     → referência a uma variante nomeada (`Tipo::Variante`)
    - SchemaField    → campo declarado (nome, tipo, default)
    - ResolvedField  → campo resolvido (nome, tipo, expressão final, origem)
    - ResolvedConfig → sequência ordenada de campos resolvidos

Decisões arquiteturais:
    - A classificação de tipo é um atributo explícito do campo, nunca
      inferida a partir do texto do default
    - Todos os tipos são imutáveis (frozen)

Invariantes:
    - A ordem de declaração é preservada em `ResolvedConfig`
    - Cada `SchemaField` produz exatamente um `ResolvedField`

Limites explícitos:
    - Não carrega arquivos
    - Não resolve overrides
    - Não emite estruturas finais
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type, Union

from .trace import ResolutionTrace


class ScalarKind(str, Enum):
    """
    Tipos escalares aceitos em campos de configuração.

    Os valores são strings para facilitar serialização em payloads de
    erro, eventos de rastreabilidade e fingerprint.

    Tipos definidos:
        - INTEGER: inteiro (booleanos não são aceitos como inteiros)
        - FLOAT: ponto flutuante (inteiros são promovidos)
        - STRING: texto
        - BOOLEAN: verdadeiro/falso
        - ARRAY: lista de literais escalares
    """
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BOOLEAN = "boolean"
    ARRAY = "array"


@dataclass(frozen=True)
class Scalar:
    """
    Campo escalar. `nullable=True` aceita null explícito como override.

    Para ARRAY, `item_kind` fixa o tipo de cada elemento (ex.: `List[int]`);
    None aceita qualquer literal escalar como elemento.
    """

    kind: ScalarKind
    nullable: bool = False
    item_kind: Optional[ScalarKind] = None

    def __post_init__(self) -> None:
        if self.item_kind is not None and self.kind is not ScalarKind.ARRAY:
            raise ValueError(f"item_kind só se aplica a {ScalarKind.ARRAY.value}")
        if self.item_kind is ScalarKind.ARRAY:
            raise ValueError("arrays aninhados não são suportados")

    def describe(self) -> str:
        base = self.kind.value
        if self.item_kind is not None:
            base = f"{base}[{self.item_kind.value}]"
        suffix = " (nullable)" if self.nullable else ""
        return f"{base}{suffix}"


@dataclass(frozen=True)
class NamedVariant:
    """
    Campo cujo valor é uma variante simbólica de um tipo enumerado.

    `variants` lista todos os nomes declarados. Quando construído via
    `from_enum`, a classe Python é mantida em `enum_type` para que a
    emissão produza membros reais do enum.
    """

    type_name: str
    variants: Tuple[str, ...]
    enum_type: Optional[Type[Enum]] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_enum(cls, enum_type: Type[Enum]) -> "NamedVariant":
        return cls(
            type_name=enum_type.__name__,
            variants=tuple(member.name for member in enum_type),
            enum_type=enum_type,
        )

    def has_variant(self, name: str) -> bool:
        return name in self.variants

    def describe(self) -> str:
        return f"variant of {self.type_name} {list(self.variants)}"


TypeTag = Union[Scalar, NamedVariant]


@dataclass(frozen=True)
class LiteralExpr:
    """Expressão literal concreta (int, float, str, bool, tupla ou None)."""

    value: Any

    def render(self) -> Any:
        if isinstance(self.value, tuple):
            return list(self.value)
        return self.value


@dataclass(frozen=True)
class VariantRef:
    """Referência à variante `variant` do tipo `type_name`."""

    type_name: str
    variant: str

    def render(self) -> str:
        return f"{self.type_name}::{self.variant}"


Expression = Union[LiteralExpr, VariantRef]


@dataclass(frozen=True)
class SchemaField:
    """
    Campo de configuração declarado pelo autor de uma biblioteca.

    `default_expr` é obrigatório em termos de contrato; a ausência
    (None) só é detectada durante a resolução, como falha fatal.
    """

    name: str
    type_tag: TypeTag
    default_expr: Optional[Expression] = None


class ValueSource(str, Enum):
    OVERRIDE = "override"
    DEFAULT = "default"


@dataclass(frozen=True)
class ResolvedField:
    name: str
    type_tag: TypeTag
    resolved_expr: Expression
    source: ValueSource = ValueSource.DEFAULT

    def as_triple(self) -> Tuple[str, TypeTag, Expression]:
        return (self.name, self.type_tag, self.resolved_expr)


@dataclass(frozen=True)
class ResolvedConfig:
    """
    Conjunto final e ordenado de valores resolvidos de um componente.

    Construído uma única vez por invocação de build, consumido pelo
    colaborador de emissão e descartado. Nunca é persistido.

    Campos:
        - component_id: identidade do componente resolvido
        - fields: campos resolvidos, na ordem de declaração
        - override_path: arquivo de overrides consultado (ou None)
        - fingerprint: hash SHA-256 canônico dos valores resolvidos
        - trace: eventos e warnings da resolução que produziu esta configuração
    """

    component_id: Optional[str]
    fields: Tuple[ResolvedField, ...]
    override_path: Optional[Path] = None
    fingerprint: str = ""
    trace: Optional[ResolutionTrace] = field(default=None, compare=False, repr=False)

    def __iter__(self) -> Iterator[ResolvedField]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def get(self, name: str) -> ResolvedField:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)

    def names(self) -> List[str]:
        return [f.name for f in self.fields]

    def as_triples(self) -> List[Tuple[str, TypeTag, Expression]]:
        return [f.as_triple() for f in self.fields]

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: f.resolved_expr.render() for f in self.fields}

    def watched_paths(self) -> List[Path]:
        """Arquivos cuja edição deve disparar um novo build do componente."""
        if self.override_path is None:
            return []
        return [self.override_path]
