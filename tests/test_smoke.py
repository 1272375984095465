# tests/test_smoke.py
"""
Testes de sanidade estrutural (smoke tests) do toml-cfg.

Garantem apenas que:
- o ambiente de testes (pytest) está funcional
- o pacote pode ser importado sem falhas estruturais
- a superfície pública declarada em `__all__` existe

Limites explícitos:
    - Não testar lógica de resolução
    - Não acumular asserts funcionais
"""

import toml_cfg


def test_smoke():
    """Sentinela mínima de integridade do pacote."""
    for name in toml_cfg.__all__:
        assert hasattr(toml_cfg, name), name
