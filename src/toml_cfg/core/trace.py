# src/toml_cfg/core/trace.py
"""
Registro estruturado de uma passada de resolução.

Cada transição da máquina de estados do motor vira um evento com
`component_id`, `stage`, `level`, `message`, timestamp UTC ISO e chaves
extras. Sinais não fatais (fallback para defaults, chaves de override
desconhecidas) também são acumulados em `warnings`.

O trace viaja junto da `ResolvedConfig` (`ResolvedConfig.trace`), de modo
que um build não estrito nunca perde os warnings da resolução.

Limites explícitos:
    - Não usa estado global de logging
    - Não persiste eventos
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


@dataclass
class ResolutionTrace:
    """
    - events: transições da máquina de estados, em ordem
    - warnings: sinais não fatais (fallbacks, chaves desconhecidas)
    """

    component_id: Optional[str]
    events: List[Dict[str, Any]] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def log(self, *, stage: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "component_id": self.component_id,
            "stage": stage,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, stage: str, message: str, **extra: Any) -> None:
        self.warnings.append(message)
        self.log(stage=stage, level="warning", message=message, **extra)

    def stages(self) -> List[str]:
        return [e["stage"] for e in self.events]
