# src/toml_cfg/build_env.py
"""
Adapter entre a invocação de build e o `BuildContext`.

Este é o único módulo que lê estado ambiente do processo. O motor de
resolução recebe apenas o `BuildContext` resultante.

Variáveis reconhecidas:
    - TOML_CFG: flags; contendo `require_cfg_present` ativa o modo estrito
    - TOML_CFG_OUT_DIR: diretório de saída do build (dica de caminho)
    - TOML_CFG_COMPONENT: identidade do componente
    - TOML_CFG_ROOT: raiz explícita do projeto (evita a caminhada)

Argumentos reconhecidos:
    - `--out-dir <path>` ou `--out-dir=<path>` (a última ocorrência vence
      e tem prioridade sobre TOML_CFG_OUT_DIR)
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping, Optional, Sequence

from .core.engine import BuildContext
from .core.overrides import DEFAULT_OVERRIDE_FILENAME

FLAGS_ENV = "TOML_CFG"
OUT_DIR_ENV = "TOML_CFG_OUT_DIR"
COMPONENT_ENV = "TOML_CFG_COMPONENT"
ROOT_ENV = "TOML_CFG_ROOT"

REQUIRE_CFG_PRESENT = "require_cfg_present"


def strict_from_flags(flags: Optional[str]) -> bool:
    return bool(flags) and REQUIRE_CFG_PRESENT in flags


def out_dir_from_args(argv: Sequence[str]) -> Optional[str]:
    """Extrai o valor de `--out-dir` dos argumentos (última ocorrência)."""
    out_dir: Optional[str] = None
    args = iter(argv)
    for arg in args:
        if arg == "--out-dir":
            out_dir = next(args, out_dir)
        elif arg.startswith("--out-dir="):
            out_dir = arg.split("=", 1)[1]
    return out_dir


def build_context_from_env(
    environ: Optional[Mapping[str, str]] = None,
    argv: Optional[Sequence[str]] = None,
    *,
    component_id: Optional[str] = None,
    override_filename: str = DEFAULT_OVERRIDE_FILENAME,
) -> BuildContext:
    """
    Monta o `BuildContext` a partir do ambiente e dos argumentos do processo.

    Args:
        environ: variáveis de ambiente (padrão: `os.environ`).
        argv: argumentos do processo (padrão: `sys.argv`).
        component_id: identidade explícita; tem prioridade sobre TOML_CFG_COMPONENT.
        override_filename: nome do arquivo de overrides.

    Sem identidade de componente o contexto carrega `component_id=None`; o
    motor trata o caso como componente ausente (defaults, ou violação do
    modo estrito).
    """
    environ = os.environ if environ is None else environ
    argv = sys.argv if argv is None else argv

    component = component_id or environ.get(COMPONENT_ENV, "").strip() or None

    out_dir = out_dir_from_args(argv)
    if out_dir is None:
        out_dir = environ.get(OUT_DIR_ENV) or None

    root = environ.get(ROOT_ENV) or None

    return BuildContext(
        component_id=component,
        out_dir_hint=out_dir,
        strict=strict_from_flags(environ.get(FLAGS_ENV)),
        explicit_root=Path(root) if root else None,
        override_filename=override_filename,
    )
