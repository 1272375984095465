# src/toml_cfg/declare.py
"""
Superfície de declaração do toml-cfg.

Uma biblioteca declara seus campos configuráveis como uma classe anotada,
marcando o default de cada campo com `default(...)`:

    @toml_config(component_id="lib-one")
    class Config:
        buffer_size: int = default(32)
        other_choice: OtherChoice = default(OtherChoice.Foo)

O decorador monta o schema na ordem de declaração, resolve os overrides
no momento da importação (o "build" de um módulo Python) e retorna um
dataclass imutável cujos defaults são os valores resolvidos. Uma
constante SHOUTY_SNAKE (`CONFIG`) com a instância é publicada no módulo
da classe.

Classificação de tipo (explícita, derivada da anotação):
    - subclasse de Enum          → NamedVariant
    - int / float / str / bool   → Scalar
    - list[T] / tuple[T, ...]    → Scalar(ARRAY, item_kind=T)
    - Optional[T] escalar        → Scalar nullable
"""

from __future__ import annotations

import enum
import inspect
import sys
import types
import typing
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type

from .build_env import build_context_from_env
from .core.engine import BuildContext, ResolutionTrace, resolve_with_context
from .core.errors import SchemaDefinitionError
from .core.types import Expression, LiteralExpr, NamedVariant, Scalar, ScalarKind, SchemaField, VariantRef
from .emit import build_struct, constant_name

_SCALAR_ANNOTATIONS = {
    int: ScalarKind.INTEGER,
    float: ScalarKind.FLOAT,
    str: ScalarKind.STRING,
    bool: ScalarKind.BOOLEAN,
    list: ScalarKind.ARRAY,
    tuple: ScalarKind.ARRAY,
}

_MISSING = object()


@dataclass(frozen=True)
class Default:
    value: Any


def default(value: Any) -> Default:
    """Marca o default de um campo configurável."""
    return Default(value)


def _item_kind(name: str, annotation: Any) -> Optional[ScalarKind]:
    # list / tuple sem parâmetros aceitam qualquer literal escalar
    args = [a for a in typing.get_args(annotation) if a is not Ellipsis]
    if not args:
        return None

    kinds = {_SCALAR_ANNOTATIONS.get(a) for a in args}
    if len(kinds) != 1 or None in kinds or ScalarKind.ARRAY in kinds:
        raise SchemaDefinitionError(
            f"tipo de elemento não suportado para o campo '{name}': {annotation!r}",
            details={"field": name, "annotation": repr(annotation)},
            hint="Elementos de array devem ser de um único tipo: int, float, str ou bool.",
        )
    return kinds.pop()


def type_tag_for(name: str, annotation: Any):
    if isinstance(annotation, type) and issubclass(annotation, enum.Enum):
        return NamedVariant.from_enum(annotation)

    origin = typing.get_origin(annotation)
    if origin in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1 and len(typing.get_args(annotation)) == 2:
            inner = type_tag_for(name, args[0])
            if isinstance(inner, Scalar):
                return Scalar(inner.kind, nullable=True, item_kind=inner.item_kind)
        raise SchemaDefinitionError(
            f"anotação não suportada para o campo '{name}': {annotation!r}",
            details={"field": name, "annotation": repr(annotation)},
            hint="Apenas Optional[T] de tipos escalares é aceito.",
        )

    base = origin if origin is not None else annotation
    if base in (list, tuple):
        return Scalar(ScalarKind.ARRAY, item_kind=_item_kind(name, annotation))
    if base in _SCALAR_ANNOTATIONS:
        return Scalar(_SCALAR_ANNOTATIONS[base])

    raise SchemaDefinitionError(
        f"anotação não suportada para o campo '{name}': {annotation!r}",
        details={"field": name, "annotation": repr(annotation)},
        hint="Use int, float, str, bool, list, Optional[...] ou uma subclasse de Enum.",
    )


def _default_expr(tag: Any, value: Any) -> Expression:
    if isinstance(tag, NamedVariant) and isinstance(value, enum.Enum):
        return VariantRef(type_name=type(value).__name__, variant=value.name)
    if isinstance(value, list):
        value = tuple(value)
    return LiteralExpr(value)


def schema_from_class(cls: Type[Any]) -> List[SchemaField]:
    """
    Extrai o schema de uma classe anotada, na ordem de declaração.

    Campos sem `default(...)` produzem `SchemaField` sem default; a falha
    (`MissingDefaultError`) ocorre na resolução.
    """
    hints = typing.get_type_hints(cls)
    schema: List[SchemaField] = []

    for name in inspect.get_annotations(cls):
        tag = type_tag_for(name, hints[name])
        marker = cls.__dict__.get(name, _MISSING)

        if marker is _MISSING:
            schema.append(SchemaField(name=name, type_tag=tag))
            continue
        if not isinstance(marker, Default):
            raise SchemaDefinitionError(
                f"default do campo '{name}' deve ser declarado com default(...)",
                details={"field": name},
            )
        schema.append(SchemaField(name=name, type_tag=tag, default_expr=_default_expr(tag, marker.value)))

    return schema


def _namespace(cls: Type[Any], field_names: List[str]) -> Dict[str, Any]:
    return {
        k: v
        for k, v in cls.__dict__.items()
        if not (k.startswith("__") and k.endswith("__")) and k not in field_names
    }


def toml_config(
    _cls: Optional[Type[Any]] = None,
    *,
    component_id: Optional[str] = None,
    context: Optional[BuildContext] = None,
    trace: Optional[ResolutionTrace] = None,
    export_constant: bool = True,
) -> Any:
    """
    Decorador de classe: declara, resolve e emite a configuração de um componente.

    Args:
        component_id: identidade do componente (padrão: TOML_CFG_COMPONENT).
        context: contexto de build explícito; quando ausente é montado a
            partir do ambiente do processo.
        trace: registro estruturado da resolução (opcional).
        export_constant: publica a instância como constante SHOUTY_SNAKE no
            módulo da classe.
    """

    def wrap(cls: Type[Any]) -> Type[Any]:
        schema = schema_from_class(cls)
        ctx = context if context is not None else build_context_from_env(component_id=component_id)
        resolved = resolve_with_context(schema, ctx, trace=trace)

        emitted = build_struct(resolved, cls.__name__, namespace=_namespace(cls, [f.name for f in schema]))
        emitted.__module__ = cls.__module__
        emitted.__qualname__ = cls.__qualname__
        emitted.__doc__ = cls.__doc__

        if export_constant:
            module = sys.modules.get(cls.__module__)
            if module is not None:
                setattr(module, constant_name(cls.__name__), emitted())

        return emitted

    if _cls is None:
        return wrap
    return wrap(_cls)
