# src/toml_cfg/core/field.py
"""
Field Resolver: decide o valor final de um campo do schema.

Procedimento:
    1. Sem overrides, ou campo ausente nos overrides → default inalterado
    2. Campo escalar → literal do override convertido para o tipo declarado
    3. Campo enumerado → referência à variante nomeada pela string do override

Coerções são **estritas**: nenhum literal atravessa tipos incompatíveis
(ex.: string onde um inteiro é declarado). A única promoção aceita é
inteiro → float. Qualquer incompatibilidade é `TypeKindMismatchError`,
com nome do campo, tipo esperado e literal ofensivo. Em arrays com tipo
de elemento declarado, cada elemento é verificado e o primeiro elemento
incompatível é nomeado (`element_index`, `element`).

Este módulo é puro: sem I/O e sem estado.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .errors import MissingDefaultError, SchemaDefinitionError, TypeKindMismatchError
from .types import (
    Expression,
    LiteralExpr,
    NamedVariant,
    ResolvedField,
    Scalar,
    ScalarKind,
    SchemaField,
    ValueSource,
    VariantRef,
)


class _Incompatible(Exception):
    """Sinal interno: literal não representável no tipo declarado."""


# -----------------------------
# Helpers: coerções escalares
# -----------------------------

def _is_scalar_literal(v: Any) -> bool:
    return isinstance(v, (bool, int, float, str))


def _coerce_integer(v: Any) -> int:
    # bool é subclasse de int; True/False nunca viram 1/0
    if isinstance(v, bool) or not isinstance(v, int):
        raise _Incompatible()
    return v


def _coerce_float(v: Any) -> float:
    if isinstance(v, bool):
        raise _Incompatible()
    if isinstance(v, float):
        return v
    if isinstance(v, int):
        return float(v)
    raise _Incompatible()


def _coerce_string(v: Any) -> str:
    if not isinstance(v, str):
        raise _Incompatible()
    return v


def _coerce_boolean(v: Any) -> bool:
    if not isinstance(v, bool):
        raise _Incompatible()
    return v


_ITEM_COERCIONS = {
    ScalarKind.INTEGER: _coerce_integer,
    ScalarKind.FLOAT: _coerce_float,
    ScalarKind.STRING: _coerce_string,
    ScalarKind.BOOLEAN: _coerce_boolean,
}


class ArrayElementError(ValueError):
    """Elemento de array incompatível com o tipo declarado dos elementos."""

    def __init__(self, index: int, item: Any, expected: str) -> None:
        super().__init__(f"elemento [{index}] {item!r} não é {expected}")
        self.index = index
        self.item = item


def _coerce_array(v: Any, item_kind: Optional[ScalarKind]) -> tuple:
    if not isinstance(v, (list, tuple)):
        raise _Incompatible()

    items = []
    for index, item in enumerate(v):
        if item_kind is None:
            if not _is_scalar_literal(item):
                raise ArrayElementError(index, item, "um literal escalar")
            items.append(item)
            continue
        try:
            items.append(_ITEM_COERCIONS[item_kind](item))
        except _Incompatible:
            raise ArrayElementError(index, item, item_kind.value) from None
    return tuple(items)


def _mismatch(
    field: SchemaField,
    raw: Any,
    *,
    reason: str = "",
    element: Optional[ArrayElementError] = None,
) -> TypeKindMismatchError:
    expected = field.type_tag.describe()
    message = (
        f"override do campo '{field.name}' incompatível: esperado {expected}, "
        f"recebido {raw!r} ({type(raw).__name__})"
    )
    if reason:
        message = f"{message}: {reason}"
    details = {
        "field": field.name,
        "expected": expected,
        "literal": raw,
        "literal_type": type(raw).__name__,
    }
    if element is not None:
        details["element_index"] = element.index
        details["element"] = element.item
    return TypeKindMismatchError(
        message,
        details=details,
        hint="Ajuste o valor no arquivo de overrides para o tipo declarado no schema.",
    )


def coerce_scalar(tag: Scalar, raw: Any) -> LiteralExpr:
    """
    Converte um literal não tipado para o tipo escalar declarado.

    Arrays são verificados elemento a elemento contra `tag.item_kind`.

    Raises:
        ArrayElementError: se um elemento do array for incompatível.
        ValueError: se o literal não for representável em `tag`.
    """
    if raw is None:
        if tag.nullable:
            return LiteralExpr(None)
        raise ValueError(f"null não é aceito para {tag.describe()}")
    try:
        if tag.kind is ScalarKind.ARRAY:
            return LiteralExpr(_coerce_array(raw, tag.item_kind))
        return LiteralExpr(_ITEM_COERCIONS[tag.kind](raw))
    except _Incompatible:
        raise ValueError(f"{raw!r} não é {tag.describe()}") from None


def variant_ref(tag: NamedVariant, raw: Any) -> VariantRef:
    """
    Converte a string do override em referência à variante correspondente.

    O nome deve coincidir exatamente com uma variante declarada.
    Nenhuma variante de fallback é escolhida.

    Raises:
        ValueError: se `raw` não for string ou não nomear uma variante.
    """
    if not isinstance(raw, str):
        raise ValueError(f"variante deve ser informada como string, recebido {type(raw).__name__}")
    if not tag.has_variant(raw):
        raise ValueError(f"variante desconhecida '{raw}' para {tag.type_name}")
    return VariantRef(type_name=tag.type_name, variant=raw)


def validate_field(field: SchemaField) -> Expression:
    """
    Valida o contrato de autoria de um campo e retorna seu default.

    Raises:
        MissingDefaultError: se o campo não declarar default.
        SchemaDefinitionError: se o default não for compatível com o tipo.
    """
    default = field.default_expr
    if default is None:
        raise MissingDefaultError(
            f"campo '{field.name}' declarado sem default",
            details={"field": field.name},
            hint="Todo campo deve declarar exatamente um default.",
        )

    tag = field.type_tag
    if isinstance(tag, Scalar):
        if not isinstance(default, LiteralExpr):
            raise SchemaDefinitionError(
                f"default do campo escalar '{field.name}' deve ser literal",
                details={"field": field.name, "default": repr(default)},
            )
        try:
            return coerce_scalar(tag, default.value)
        except ValueError as e:
            raise SchemaDefinitionError(
                f"default do campo '{field.name}' incompatível com {tag.describe()}: {e}",
                details={"field": field.name, "expected": tag.describe(), "default": default.value},
            ) from e

    if isinstance(tag, NamedVariant):
        if not tag.variants:
            raise SchemaDefinitionError(
                f"tipo enumerado '{tag.type_name}' do campo '{field.name}' não declara variantes",
                details={"field": field.name, "type_name": tag.type_name},
            )
        if (
            not isinstance(default, VariantRef)
            or default.type_name != tag.type_name
            or not tag.has_variant(default.variant)
        ):
            raise SchemaDefinitionError(
                f"default do campo '{field.name}' deve referenciar uma variante de {tag.type_name}",
                details={"field": field.name, "type_name": tag.type_name, "default": repr(default)},
            )
        return default

    raise SchemaDefinitionError(
        f"classificação de tipo desconhecida para o campo '{field.name}': {type(tag).__name__}",
        details={"field": field.name},
    )


def resolve(field: SchemaField, overrides: Optional[Mapping[str, Any]]) -> Expression:
    """
    Resolve a expressão final de um campo.

    Args:
        field: campo declarado.
        overrides: sub-tabela do componente, ou None.

    Returns:
        Expression: override convertido, ou o default inalterado.

    Raises:
        MissingDefaultError / SchemaDefinitionError: contrato de schema violado.
        TypeKindMismatchError: override incompatível com o tipo do campo.
    """
    return resolve_field(field, overrides).resolved_expr


def resolve_field(field: SchemaField, overrides: Optional[Mapping[str, Any]]) -> ResolvedField:
    """Variante de `resolve` que também informa a origem do valor."""
    default = validate_field(field)

    if overrides is None or field.name not in overrides:
        return ResolvedField(field.name, field.type_tag, default, ValueSource.DEFAULT)

    raw = overrides[field.name]
    tag = field.type_tag

    try:
        if isinstance(tag, Scalar):
            expr: Expression = coerce_scalar(tag, raw)
        else:
            expr = variant_ref(tag, raw)
    except ValueError as e:
        element = e if isinstance(e, ArrayElementError) else None
        raise _mismatch(field, raw, reason=str(e), element=element) from e

    return ResolvedField(field.name, tag, expr, ValueSource.OVERRIDE)
