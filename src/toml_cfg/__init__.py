# src/toml_cfg/__init__.py
"""
toml-cfg: configuração sobrescrevível resolvida em tempo de build.

Bibliotecas declaram campos configuráveis, cada um com tipo explícito e
default obrigatório. Apenas o projeto raiz fornece overrides, por meio de
um único arquivo compartilhado (`cfg.toml`) indexado pelo nome do
componente:

    [lib-one]
    buffer_size = 4096

    [lib-two]
    greeting = "Guten tag!"

Existem exatamente duas camadas: o default declarado e o override do
arquivo raiz. A resolução acontece uma única vez, no build (para módulos
Python, na importação), nunca em tempo de execução.

Arquitetura em alto nível:
    - core.paths     → descoberta da raiz do projeto
    - core.overrides → carregamento do arquivo de overrides
    - core.field     → resolução por campo e reconciliação de tipos
    - core.engine    → orquestração, modo estrito e rastreabilidade
    - build_env      → adapter do ambiente do build para `BuildContext`
    - declare        → `default(...)` e o decorador `toml_config`
    - emit           → estrutura final imutável e constante SHOUTY_SNAKE
"""

from .build_env import build_context_from_env
from .core import (
    BuildContext,
    ErrorPayload,
    LiteralExpr,
    MissingDefaultError,
    NamedVariant,
    ResolutionTrace,
    ResolvedConfig,
    ResolvedField,
    Scalar,
    ScalarKind,
    SchemaDefinitionError,
    SchemaField,
    StrictModeViolationError,
    TomlCfgError,
    TypeKindMismatchError,
    VariantRef,
    resolve_all,
    resolve_root,
    resolve_with_context,
)
from .declare import default, toml_config
from .emit import constant_name, materialize

__all__ = [
    "BuildContext",
    "ErrorPayload",
    "LiteralExpr",
    "MissingDefaultError",
    "NamedVariant",
    "ResolutionTrace",
    "ResolvedConfig",
    "ResolvedField",
    "Scalar",
    "ScalarKind",
    "SchemaDefinitionError",
    "SchemaField",
    "StrictModeViolationError",
    "TomlCfgError",
    "TypeKindMismatchError",
    "VariantRef",
    "build_context_from_env",
    "constant_name",
    "default",
    "materialize",
    "resolve_all",
    "resolve_root",
    "resolve_with_context",
    "toml_config",
]
