# src/toml_cfg/core/__init__.py
"""
Core do toml-cfg.

Este pacote contém o motor de resolução, independente de qualquer
mecanismo de invocação de build:
    - core.paths     → descoberta da raiz do projeto
    - core.overrides → carregamento da tabela de overrides
    - core.field     → resolução e reconciliação de tipos por campo
    - core.engine    → orquestração e modo estrito
    - core.trace     → registro estruturado de eventos e warnings
    - core.hashing   → fingerprint da configuração resolvida

O core nunca lê variáveis de ambiente nem argumentos de processo.
"""

from .engine import BuildContext, resolve_all, resolve_with_context  # noqa: F401
from .errors import (  # noqa: F401
    ErrorPayload,
    MissingDefaultError,
    SchemaDefinitionError,
    StrictModeViolationError,
    TomlCfgError,
    TypeKindMismatchError,
)
from .field import resolve, resolve_field  # noqa: F401
from .overrides import LoadStatus, OverrideLoadResult, load, load_overrides  # noqa: F401
from .paths import ExplicitRootLocator, RootLocator, SentinelRootLocator, resolve_root  # noqa: F401
from .trace import ResolutionTrace  # noqa: F401
from .types import (  # noqa: F401
    LiteralExpr,
    NamedVariant,
    ResolvedConfig,
    ResolvedField,
    Scalar,
    ScalarKind,
    SchemaField,
    ValueSource,
    VariantRef,
)
