# tests/conftest.py
"""
Fixtures compartilhados para testes do toml-cfg.

Este módulo define fixtures reutilizáveis que fornecem:
- conteúdo canônico de arquivos de overrides (`cfg.toml`)
- layouts de projeto com diretório de saída de build (`target/...`)
- schemas mínimos com campos escalares e enumerados

Decisões arquiteturais:
    - Conteúdo de arquivos é fornecido como string; o teste decide onde gravá-lo
    - Layouts de projeto são criados sob `tmp_path` (isolados por teste)
    - Nenhuma fixture lê ou altera variáveis de ambiente do processo

Invariantes:
    - Fixtures são determinísticas
    - Fixtures não executam resolução
"""

from pathlib import Path

import pytest

from toml_cfg.core.types import LiteralExpr, NamedVariant, Scalar, ScalarKind, SchemaField, VariantRef


@pytest.fixture
def root_cfg_toml() -> str:
    """Arquivo de overrides típico de um projeto raiz com duas bibliotecas."""
    return """\
# a toml-cfg file

[lib-one]
buffer_size = 4096

[lib-two]
greeting = "Guten tag!"

[compA]
buffer_size = 4096
choice = "Other"
"""


@pytest.fixture
def project_tree(tmp_path: Path):
    """
    Cria `<tmp>/app/target/debug/deps` e retorna `(root, out_dir)`.

    `root` é o diretório do projeto (pai de `target`) e `out_dir` é a dica
    que o build informaria.
    """
    root = tmp_path / "app"
    out_dir = root / "target" / "debug" / "deps"
    out_dir.mkdir(parents=True)
    return root, out_dir


@pytest.fixture
def choice_tag() -> NamedVariant:
    return NamedVariant(type_name="Choice", variants=("One", "Other", "Third"))


@pytest.fixture
def buffer_size_field() -> SchemaField:
    return SchemaField(
        name="buffer_size",
        type_tag=Scalar(ScalarKind.INTEGER),
        default_expr=LiteralExpr(32),
    )


@pytest.fixture
def choice_field(choice_tag) -> SchemaField:
    return SchemaField(
        name="choice",
        type_tag=choice_tag,
        default_expr=VariantRef("Choice", "One"),
    )


@pytest.fixture
def comp_a_schema(buffer_size_field, choice_field):
    return [buffer_size_field, choice_field]
