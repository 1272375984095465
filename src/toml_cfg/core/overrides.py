# src/toml_cfg/core/overrides.py
"""
Loader canônico do arquivo de overrides do toml-cfg.

Este módulo é responsável por localizar o arquivo de overrides na raiz
do projeto, parseá-lo em uma tabela de dois níveis
(componente → campo → literal) e extrair a sub-tabela do componente
que está sendo resolvido.

Formatos suportados (inferidos pela extensão):
    - TOML (.toml), formato padrão (`cfg.toml`)
    - YAML (.yaml, .yml)
    - JSON (.json)

Política de carregamento (leniente):
    - arquivo inexistente          → sem overrides (`file_missing`)
    - falha de parse ou estrutura  → sem overrides (`parse_failed`)
    - componente ausente na tabela → sem overrides (`component_missing`)
    - componente presente          → sub-tabela (possivelmente vazia)

Decisões arquiteturais:
    - O loader nunca levanta exceção por conteúdo malformado; ele degrada
      para "usar defaults" e informa o motivo em `OverrideLoadResult`
    - Uma sub-tabela vazia é distinta de "sem overrides"
    - Chaves duplicadas: TOML rejeita (parse_failed); YAML/JSON mantêm a
      última ocorrência

Invariantes:
    - A tabela carregada nunca é mutada após o load
    - O arquivo é lido no máximo uma vez por resolução

Limites explícitos:
    - Não interpreta níveis de aninhamento além de componente → campo
    - Não valida tipos dos literais (responsabilidade do Field Resolver)
    - Não decide sobre modo estrito
"""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import yaml  # PyYAML


DEFAULT_OVERRIDE_FILENAME = "cfg.toml"

ComponentOverrides = Mapping[str, Any]
OverrideTable = Mapping[str, ComponentOverrides]


class LoadStatus(str, Enum):
    LOADED = "loaded"
    FILE_MISSING = "file_missing"
    PARSE_FAILED = "parse_failed"
    COMPONENT_MISSING = "component_missing"


@dataclass(frozen=True)
class OverrideLoadResult:
    """
    Resultado do carregamento de overrides de um componente.

    Campos:
        - status: estágio final do carregamento
        - path: arquivo consultado
        - overrides: sub-tabela do componente (None se não obtida)
        - reason: mensagem humana (ex.: erro do parser)
    """

    status: LoadStatus
    path: Path
    overrides: Optional[ComponentOverrides] = None
    reason: str = ""

    @property
    def found(self) -> bool:
        return self.overrides is not None


class _OverrideFormatError(ValueError):
    pass


def _parse(path: Path, raw: str) -> Any:
    suffix = path.suffix.lower()

    if suffix == ".toml":
        return tomllib.loads(raw)
    if suffix in {".yaml", ".yml"}:
        data = yaml.safe_load(raw)
        # YAML vazio -> tabela vazia
        return {} if data is None else data
    if suffix == ".json":
        return json.loads(raw)

    raise _OverrideFormatError(f"formato de overrides não suportado: {path.suffix or '<sem extensão>'}")


def parse_override_table(path: Path, raw: str) -> OverrideTable:
    """
    Parseia o conteúdo bruto de um arquivo de overrides.

    Raises:
        ValueError: se o formato não for suportado, o parse falhar ou a
            estrutura não for componente → mapa de campos.
    """
    try:
        data = _parse(path, raw)
    except _OverrideFormatError:
        raise
    except (tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ValueError(str(e) or "falha ao parsear arquivo de overrides") from e

    if not isinstance(data, dict):
        raise ValueError(f"raiz do arquivo de overrides deve ser um mapa, recebido: {type(data).__name__}")

    table: Dict[str, ComponentOverrides] = {}
    for component_id, entries in data.items():
        # seção YAML vazia (`lib-one:`) -> sub-tabela vazia
        if entries is None:
            entries = {}
        if not isinstance(entries, dict):
            raise ValueError(
                f"entrada do componente '{component_id}' deve ser um mapa, "
                f"recebido: {type(entries).__name__}"
            )
        table[str(component_id)] = MappingProxyType(dict(entries))

    return MappingProxyType(table)


def load_overrides(
    root: Path,
    component_id: str,
    *,
    filename: str = DEFAULT_OVERRIDE_FILENAME,
) -> OverrideLoadResult:
    """
    Carrega a sub-tabela de overrides de `component_id` a partir de `root / filename`.

    Nunca levanta exceção por arquivo ausente ou malformado.
    """
    path = Path(root) / filename

    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return OverrideLoadResult(
            status=LoadStatus.FILE_MISSING,
            path=path,
            reason=f"arquivo de overrides não encontrado: {path}",
        )
    except (OSError, UnicodeDecodeError) as e:
        return OverrideLoadResult(
            status=LoadStatus.PARSE_FAILED,
            path=path,
            reason=f"falha ao ler {path}: {e}",
        )

    try:
        table = parse_override_table(path, raw)
    except ValueError as e:
        return OverrideLoadResult(
            status=LoadStatus.PARSE_FAILED,
            path=path,
            reason=f"arquivo de overrides inválido {path}: {e}",
        )

    if component_id not in table:
        return OverrideLoadResult(
            status=LoadStatus.COMPONENT_MISSING,
            path=path,
            reason=f"componente '{component_id}' ausente em {path}",
        )

    return OverrideLoadResult(
        status=LoadStatus.LOADED,
        path=path,
        overrides=table[component_id],
    )


def load(
    root: Path,
    component_id: str,
    *,
    filename: str = DEFAULT_OVERRIDE_FILENAME,
) -> Optional[ComponentOverrides]:
    """Contrato estreito: retorna apenas a sub-tabela do componente, ou None."""
    return load_overrides(root, component_id, filename=filename).overrides
