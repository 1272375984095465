# src/toml_cfg/emit.py
"""
Colaborador de emissão: transforma uma `ResolvedConfig` em estrutura utilizável.

Produz:
    - um tipo dataclass imutável com um atributo por campo, na ordem de
      declaração, cujos defaults são os valores resolvidos
    - a instância única desse tipo
    - o nome canônico da constante (SHOUTY_SNAKE: `Config` → `CONFIG`)

Referências a variantes viram membros reais do enum quando a classe é
conhecida (`NamedVariant.from_enum`); caso contrário, a string
`Tipo::Variante`.
"""

from __future__ import annotations

import re
from dataclasses import field as dc_field
from dataclasses import make_dataclass
from typing import Any, Dict, Optional, Tuple, Type

from .core.types import Expression, LiteralExpr, NamedVariant, ResolvedConfig, ResolvedField, Scalar, ScalarKind

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

_PY_TYPES = {
    ScalarKind.INTEGER: int,
    ScalarKind.FLOAT: float,
    ScalarKind.STRING: str,
    ScalarKind.BOOLEAN: bool,
    ScalarKind.ARRAY: tuple,
}


def constant_name(struct_name: str) -> str:
    """`HttpConfig` → `HTTP_CONFIG`; `my-config` → `MY_CONFIG`."""
    spaced = _WORD_BOUNDARY.sub("_", struct_name)
    return re.sub(r"[^0-9A-Za-z]+", "_", spaced).strip("_").upper()


def expression_value(tag: Any, expr: Expression) -> Any:
    if isinstance(expr, LiteralExpr):
        return expr.value
    if isinstance(tag, NamedVariant) and tag.enum_type is not None:
        return tag.enum_type[expr.variant]
    return expr.render()


def _annotation(f: ResolvedField) -> Any:
    tag = f.type_tag
    if isinstance(tag, Scalar):
        base = _PY_TYPES[tag.kind]
        return Optional[base] if tag.nullable else base
    if isinstance(tag, NamedVariant) and tag.enum_type is not None:
        return tag.enum_type
    return str


def build_struct(
    resolved: ResolvedConfig,
    struct_name: str,
    *,
    namespace: Optional[Dict[str, Any]] = None,
) -> Type[Any]:
    """Cria o tipo dataclass imutável com os valores resolvidos como defaults.

    `namespace` acrescenta métodos e atributos ao tipo emitido.
    """
    field_specs: list[Tuple[str, Any, Any]] = []
    for f in resolved:
        value = expression_value(f.type_tag, f.resolved_expr)
        field_specs.append((f.name, _annotation(f), dc_field(default=value)))

    cls = make_dataclass(struct_name, field_specs, frozen=True, namespace=namespace)
    cls.__toml_cfg__ = resolved
    return cls


def materialize(resolved: ResolvedConfig, struct_name: str = "Config") -> Any:
    """Retorna a instância única da estrutura emitida."""
    return build_struct(resolved, struct_name)()
