# src/horizon_engine/core/pipeline/context.py
"""
Contexto de execução observável do Horizon Engine.

Este módulo define o `ExecutionContext`, a estrutura opcional que o
chamador entrega ao Engine para acompanhar uma execução de grafo.

O ExecutionContext atua como:
    - log estruturado de eventos de execução (por nó)
    - coletor de warnings não fatais (ex.: nó servido por fallback)
    - ponto de acesso ao Manifest da execução, quando existir

Princípios fundamentais:
    - Isolamento por execução (cada chamada usa seu próprio contexto)
    - Eventos são dados, não texto livre em stdout
    - Ausência de estado global compartilhado

Invariantes:
    - Eventos sempre incluem `run_id` e `node_id`
    - Warnings são agrupados por `node_id`
    - A ordem de `events` reflete a ordem real de registro

Limites explícitos:
    - Não executa nós
    - Não planeja nem coordena execução
    - Não persiste dados automaticamente
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from horizon_engine.core.traceability.manifest import HorizonManifest


@dataclass
class ExecutionContext:
    """
    Contexto de observação de uma execução de grafo.

    Campos canônicos:
    - run_id: identificador da execução
    - created_at: timestamp UTC de criação do contexto
    - config: configuração efetiva (defaults + local deep-merge)
    - meta: metadados livres do chamador
    - manifest: Manifest da execução (opcional)
    - events: log estruturado de eventos
    - warnings: warnings por node_id
    """

    run_id: str
    created_at: datetime
    config: Dict[str, Any] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)
    manifest: Optional[HorizonManifest] = None

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, node_id: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "node_id": node_id,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, node_id: str, message: str) -> None:
        if node_id not in self.warnings:
            self.warnings[node_id] = []
        self.warnings[node_id].append(message)

    def events_for(self, node_id: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e.get("node_id") == node_id]
