# src/toml_cfg/core/paths.py
"""
Descoberta da raiz do projeto a partir de uma dica de build.

O pipeline de build informa o diretório de saída da compilação
(ex.: `/work/app/target/debug/deps`). A raiz do projeto é o diretório
pai do primeiro segmento sentinela (`target`) encontrado ao subir pela
hierarquia de diretórios.

Política:
    - dica ausente ou vazia → "não encontrado"
    - nenhum segmento igual ao sentinela → "não encontrado"
    - caso contrário → pai do diretório sentinela

"Não encontrado" nunca é erro neste módulo: quem chama decide
(fallback para defaults, ou violação de modo estrito).

A heurística depende de um layout convencional de saída. Por isso ela é
apenas uma estratégia (`SentinelRootLocator`) atrás do protocolo
`RootLocator`; `ExplicitRootLocator` evita a caminhada por completo.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Optional, Protocol, Union, runtime_checkable


DEFAULT_SENTINEL = "target"

PathHint = Union[str, PurePath]


def resolve_root(
    out_dir_hint: Optional[PathHint],
    *,
    sentinel: str = DEFAULT_SENTINEL,
) -> Optional[Path]:
    """
    Resolve a raiz do projeto subindo a partir de `out_dir_hint`.

    Operação puramente sobre o caminho: nenhum acesso ao filesystem.
    Idempotente: a mesma dica sempre produz a mesma raiz (ou sempre None).

    Args:
        out_dir_hint: diretório de saída informado pelo build (ou None).
        sentinel: nome reservado do diretório raiz de saída.

    Returns:
        Optional[Path]: raiz do projeto, ou None se não encontrada.
    """
    if out_dir_hint is None:
        return None
    if isinstance(out_dir_hint, str) and not out_dir_hint.strip():
        return None

    current = Path(out_dir_hint)
    while current.name != sentinel:
        parent = current.parent
        if parent == current:
            # acabaram os segmentos
            return None
        current = parent

    return current.parent


@runtime_checkable
class RootLocator(Protocol):
    """Capacidade de localizar a raiz que contém o arquivo de overrides."""

    def locate(self, out_dir_hint: Optional[PathHint]) -> Optional[Path]:
        ...


@dataclass(frozen=True)
class SentinelRootLocator:
    """Estratégia padrão: caminhada até o diretório sentinela."""

    sentinel: str = DEFAULT_SENTINEL

    def locate(self, out_dir_hint: Optional[PathHint]) -> Optional[Path]:
        return resolve_root(out_dir_hint, sentinel=self.sentinel)


@dataclass(frozen=True)
class ExplicitRootLocator:
    """Raiz fornecida explicitamente pelo chamador; a dica é ignorada."""

    root: Path

    def locate(self, out_dir_hint: Optional[PathHint]) -> Optional[Path]:
        return Path(self.root)
