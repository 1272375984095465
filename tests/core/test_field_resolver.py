# tests/core/test_field_resolver.py
"""
Testes do Field Resolver (resolve / resolve_field / validate_field).

Os testes asseguram que:
- sem override, o default é retornado inalterado
- overrides escalares compatíveis substituem o default
- incompatibilidades de tipo são fatais e nomeiam o campo
- overrides de campos enumerados viram referências a variantes
- o contrato de autoria (default obrigatório e compatível) é verificado

Decisões arquiteturais:
    - Nenhuma coerção silenciosa entre tipos incompatíveis
    - A única promoção aceita é inteiro → float
    - Nenhuma variante de fallback é escolhida
"""

import pytest

from toml_cfg.core.errors import MissingDefaultError, SchemaDefinitionError, TypeKindMismatchError
from toml_cfg.core.field import resolve, resolve_field, validate_field
from toml_cfg.core.types import (
    LiteralExpr,
    NamedVariant,
    Scalar,
    ScalarKind,
    SchemaField,
    ValueSource,
    VariantRef,
)


def _field(kind: ScalarKind, default, *, nullable: bool = False, name: str = "value") -> SchemaField:
    return SchemaField(name=name, type_tag=Scalar(kind, nullable=nullable), default_expr=LiteralExpr(default))


# -----------------------------
# Default fallback
# -----------------------------

def test_no_overrides_returns_default(buffer_size_field):
    assert resolve(buffer_size_field, None) == LiteralExpr(32)


def test_absent_key_returns_default(buffer_size_field, choice_field):
    overrides = {"unrelated": 1}
    assert resolve(buffer_size_field, overrides) == LiteralExpr(32)
    assert resolve(choice_field, overrides) == VariantRef("Choice", "One")


def test_empty_overrides_returns_default(buffer_size_field):
    resolved = resolve_field(buffer_size_field, {})
    assert resolved.resolved_expr == LiteralExpr(32)
    assert resolved.source is ValueSource.DEFAULT


# -----------------------------
# Scalar overrides
# -----------------------------

@pytest.mark.parametrize(
    "kind,default,raw,expected",
    [
        (ScalarKind.INTEGER, 32, 4096, 4096),
        (ScalarKind.INTEGER, 32, -1, -1),
        (ScalarKind.FLOAT, 0.5, 1.25, 1.25),
        (ScalarKind.FLOAT, 0.5, 2, 2.0),
        (ScalarKind.STRING, "hello", "Guten tag!", "Guten tag!"),
        (ScalarKind.STRING, "hello", "", ""),
        (ScalarKind.BOOLEAN, False, True, True),
        (ScalarKind.ARRAY, [1, 2], [3, 4, 5], (3, 4, 5)),
        (ScalarKind.ARRAY, [1, 2], [], ()),
    ],
)
def test_compatible_scalar_override_wins(kind, default, raw, expected):
    field = _field(kind, default)
    resolved = resolve_field(field, {"value": raw})
    assert resolved.resolved_expr == LiteralExpr(expected)
    assert resolved.source is ValueSource.OVERRIDE


def test_float_override_promotes_integer_to_float():
    expr = resolve(_field(ScalarKind.FLOAT, 1.0), {"value": 3})
    assert isinstance(expr.value, float)


@pytest.mark.parametrize(
    "kind,default,raw",
    [
        (ScalarKind.INTEGER, 32, "4096"),
        (ScalarKind.INTEGER, 32, True),
        (ScalarKind.INTEGER, 32, 1.5),
        (ScalarKind.FLOAT, 1.0, "1.0"),
        (ScalarKind.FLOAT, 1.0, False),
        (ScalarKind.STRING, "hello", 42),
        (ScalarKind.BOOLEAN, True, "true"),
        (ScalarKind.BOOLEAN, True, 1),
        (ScalarKind.ARRAY, [1], "1,2"),
        (ScalarKind.ARRAY, [1], [1, {"nested": True}]),
    ],
)
def test_incompatible_scalar_override_is_fatal(kind, default, raw):
    field = _field(kind, default, name="buffer_size")
    with pytest.raises(TypeKindMismatchError) as excinfo:
        resolve(field, {"buffer_size": raw})

    err = excinfo.value
    assert err.details["field"] == "buffer_size"
    assert err.details["expected"] == kind.value
    assert err.details["literal"] == raw
    assert "buffer_size" in str(err)


def test_explicit_null_requires_nullable_field():
    with pytest.raises(TypeKindMismatchError):
        resolve(_field(ScalarKind.STRING, "x"), {"value": None})

    expr = resolve(_field(ScalarKind.STRING, "x", nullable=True), {"value": None})
    assert expr == LiteralExpr(None)


# -----------------------------
# Named-variant overrides
# -----------------------------

def test_known_variant_resolves_to_reference(choice_field):
    resolved = resolve_field(choice_field, {"choice": "Other"})
    assert resolved.resolved_expr == VariantRef("Choice", "Other")
    assert resolved.resolved_expr.render() == "Choice::Other"
    assert resolved.source is ValueSource.OVERRIDE


def test_unknown_variant_is_fatal(choice_field):
    with pytest.raises(TypeKindMismatchError) as excinfo:
        resolve(choice_field, {"choice": "Unknown"})
    assert excinfo.value.details["field"] == "choice"
    assert excinfo.value.details["literal"] == "Unknown"


def test_variant_match_is_exact(choice_field):
    with pytest.raises(TypeKindMismatchError):
        resolve(choice_field, {"choice": "other"})


@pytest.mark.parametrize("raw", [1, True, ["Other"], None])
def test_non_string_variant_is_fatal(choice_field, raw):
    with pytest.raises(TypeKindMismatchError):
        resolve(choice_field, {"choice": raw})


# -----------------------------
# Schema authoring contract
# -----------------------------

def test_missing_default_is_fatal_even_without_overrides():
    field = SchemaField(name="buffer_size", type_tag=Scalar(ScalarKind.INTEGER))
    with pytest.raises(MissingDefaultError) as excinfo:
        resolve(field, None)
    assert excinfo.value.details == {"field": "buffer_size"}


def test_default_must_match_scalar_kind():
    field = SchemaField(name="n", type_tag=Scalar(ScalarKind.INTEGER), default_expr=LiteralExpr("32"))
    with pytest.raises(SchemaDefinitionError):
        validate_field(field)


def test_scalar_default_cannot_be_variant_reference():
    field = SchemaField(name="n", type_tag=Scalar(ScalarKind.STRING), default_expr=VariantRef("Choice", "One"))
    with pytest.raises(SchemaDefinitionError):
        validate_field(field)


def test_variant_default_must_name_declared_variant(choice_tag):
    wrong_variant = SchemaField(name="c", type_tag=choice_tag, default_expr=VariantRef("Choice", "A"))
    wrong_type = SchemaField(name="c", type_tag=choice_tag, default_expr=VariantRef("OtherChoice", "One"))
    literal = SchemaField(name="c", type_tag=choice_tag, default_expr=LiteralExpr("One"))

    for field in (wrong_variant, wrong_type, literal):
        with pytest.raises(SchemaDefinitionError):
            validate_field(field)


def test_variant_type_without_variants_is_rejected():
    tag = NamedVariant(type_name="Empty", variants=())
    field = SchemaField(name="e", type_tag=tag, default_expr=VariantRef("Empty", "X"))
    with pytest.raises(SchemaDefinitionError):
        validate_field(field)


# -----------------------------
# Typed array elements
# -----------------------------

def _array_field(item_kind: ScalarKind, default) -> SchemaField:
    return SchemaField(
        name="ports",
        type_tag=Scalar(ScalarKind.ARRAY, item_kind=item_kind),
        default_expr=LiteralExpr(default),
    )


def test_typed_array_accepts_matching_elements():
    resolved = resolve_field(_array_field(ScalarKind.INTEGER, (80, 443)), {"ports": [8080, 8443]})
    assert resolved.resolved_expr == LiteralExpr((8080, 8443))
    assert resolved.source is ValueSource.OVERRIDE


def test_typed_array_rejects_wrong_element_kind():
    field = _array_field(ScalarKind.INTEGER, (80, 443))
    with pytest.raises(TypeKindMismatchError) as excinfo:
        resolve(field, {"ports": ["http", "https"]})

    err = excinfo.value
    assert err.details["field"] == "ports"
    assert err.details["expected"] == "array[integer]"
    assert err.details["element_index"] == 0
    assert err.details["element"] == "http"
    assert "ports" in str(err)
    assert "'http'" in str(err)


def test_typed_array_names_first_bad_element():
    field = _array_field(ScalarKind.STRING, ("a",))
    with pytest.raises(TypeKindMismatchError) as excinfo:
        resolve(field, {"ports": ["ok", 3, True]})
    assert excinfo.value.details["element_index"] == 1
    assert excinfo.value.details["element"] == 3


@pytest.mark.parametrize(
    "item_kind,raw",
    [
        (ScalarKind.INTEGER, [1, True]),
        (ScalarKind.INTEGER, [1, 2.5]),
        (ScalarKind.BOOLEAN, [True, 0]),
        (ScalarKind.FLOAT, [1.0, "2.0"]),
    ],
)
def test_typed_array_never_crosses_kinds(item_kind, raw):
    default = {
        ScalarKind.INTEGER: (1,),
        ScalarKind.BOOLEAN: (True,),
        ScalarKind.FLOAT: (1.0,),
    }[item_kind]
    with pytest.raises(TypeKindMismatchError):
        resolve(_array_field(item_kind, default), {"ports": raw})


def test_float_array_promotes_integer_elements():
    expr = resolve(_array_field(ScalarKind.FLOAT, (0.5,)), {"ports": [1, 2.5]})
    assert expr == LiteralExpr((1.0, 2.5))
    assert all(isinstance(v, float) for v in expr.value)


def test_typed_array_default_is_checked():
    field = _array_field(ScalarKind.INTEGER, (80, "443"))
    with pytest.raises(SchemaDefinitionError) as excinfo:
        validate_field(field)
    assert excinfo.value.details["field"] == "ports"


def test_item_kind_only_applies_to_arrays():
    with pytest.raises(ValueError):
        Scalar(ScalarKind.INTEGER, item_kind=ScalarKind.INTEGER)
    with pytest.raises(ValueError):
        Scalar(ScalarKind.ARRAY, item_kind=ScalarKind.ARRAY)
