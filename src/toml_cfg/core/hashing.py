# src/toml_cfg/core/hashing.py
"""
Fingerprint canônico de uma configuração resolvida.

O fingerprint representa a **identidade** dos valores entregues ao
colaborador de emissão e permite que o pipeline de build detecte se a
saída mudou entre duas invocações.

Política de hashing:
    - Serialização JSON canônica (chaves ordenadas, separadores compactos)
    - A ordem de declaração dos campos participa do hash
    - O rótulo de tipo inclui nulabilidade e tipo de elemento de arrays
    - Codificação UTF-8
    - Algoritmo SHA-256

Invariantes:
    - O valor gerado é sempre uma string hexadecimal de 64 caracteres
    - As mesmas entradas sempre produzem o mesmo fingerprint
"""

import hashlib
import json
from typing import Any, Dict, Iterable, List

from .types import NamedVariant, ResolvedField, Scalar


def _type_label(field: ResolvedField) -> str:
    tag = field.type_tag
    if isinstance(tag, Scalar):
        return tag.describe()
    if isinstance(tag, NamedVariant):
        return f"variant:{tag.type_name}"
    return type(tag).__name__


def canonical_entries(fields: Iterable[ResolvedField]) -> List[Dict[str, Any]]:
    return [
        {
            "name": f.name,
            "type": _type_label(f),
            "value": f.resolved_expr.render(),
        }
        for f in fields
    ]


def compute_config_hash(fields: Iterable[ResolvedField]) -> str:
    """
    Gera o fingerprint SHA-256 de uma sequência de campos resolvidos.

    Args:
        fields: campos resolvidos, na ordem de declaração.

    Returns:
        str: hash SHA-256 hexadecimal.
    """
    canonical_json = json.dumps(
        canonical_entries(fields),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )

    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()
