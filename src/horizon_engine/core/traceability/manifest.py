# src/horizon_engine/core/traceability/manifest.py
"""
Manifest v1 — rastreabilidade forense de execuções de grafo.

Este módulo define a estrutura e as operações canônicas do Manifest, o
artefato de auditoria de uma execução do Horizon Engine.

O Manifest consolida, de forma determinística e auditável:
    - metadados da execução (run_id, tenant, início, versão do engine)
    - hashes de entrada (config efetiva e estrutura do grafo)
    - estado incremental de cada nó
    - Event Log ordenado de eventos explícitos

Princípios fundamentais:
    - Nenhum evento é emitido implicitamente
    - Toda mutação ocorre por chamadas explícitas da API
    - A ordem do Event Log reflete a ordem real de execução
    - O Manifest é serializável e reconstruível (round-trip)

Decisões arquiteturais:
    - UTC é o timezone canônico para todos os timestamps
    - O formato de persistência é JSON determinístico
    - Nós e eventos iniciam vazios

Limites explícitos:
    - Não executa o grafo
    - Não decide políticas de execução (filtro, cancelamento)
    - Não realiza migração de versões de schema
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from horizon_engine.core.config.hashing import canonical_sha256


def _ensure_tzaware_utc(dt: datetime) -> datetime:
    """
    Normaliza um timestamp para timezone-aware em UTC.

    Timestamps timezone-naive são assumidos como UTC; os demais são
    convertidos.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _iso(dt: datetime) -> str:
    return _ensure_tzaware_utc(dt).isoformat()


def _ms_between(start: datetime, end: datetime) -> int:
    """Duração em milissegundos entre dois timestamps (nunca negativa)."""
    s = _ensure_tzaware_utc(start)
    e = _ensure_tzaware_utc(end)
    return max(0, int((e - s).total_seconds() * 1000))


@dataclass
class HorizonManifest:
    """
    Manifest v1 — registro forense de uma execução de grafo.

    Campos principais:
        - run: metadados da execução (run_id, tenant, started_at, engine_version)
        - inputs: hashes de configuração e de grafo
        - nodes: estado incremental de cada nó, indexado por node_id
        - events: Event Log ordenado de eventos explícitos

    Invariantes:
        - `nodes` é sempre um dicionário indexado por node_id
        - `events` é sempre uma lista ordenada
        - A estrutura completa é serializável
    """

    run: Dict[str, Any]
    inputs: Dict[str, Any]
    nodes: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Cópia serializável e independente do estado interno."""
        return {
            "run": dict(self.run),
            "inputs": dict(self.inputs),
            "nodes": {k: dict(v) for k, v in self.nodes.items()},
            "events": [dict(e) for e in self.events],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HorizonManifest":
        """Reconstrói um Manifest; campos ausentes viram estruturas vazias."""
        return cls(
            run=dict(data.get("run", {})),
            inputs=dict(data.get("inputs", {})),
            nodes={k: dict(v) for k, v in (data.get("nodes", {}) or {}).items()},
            events=[dict(e) for e in (data.get("events", []) or [])],
        )


def compute_graph_hash(graph: Any) -> str:
    """
    Gera a identidade estrutural de um grafo (SHA-256).

    Participam do hash apenas ids, estágios e arestas, em ordem de
    declaração. Estado, pesos e runtimes não participam: dois grafos com a
    mesma topologia produzem o mesmo hash.

    Args:
        graph: objeto com `nodes` (SyntheticNode) e `edges` (GraphEdge).

    Returns:
        str: hash hexadecimal de 64 caracteres.
    """
    structure = {
        "nodes": [[n.node.id, n.node.kind.value] for n in graph.nodes],
        "edges": [[e.from_id, e.to_id] for e in graph.edges],
    }
    return canonical_sha256(structure)


def create_manifest(
    *,
    run_id: str,
    tenant: str,
    started_at: datetime,
    engine_version: str,
    config_hash: str,
    graph_hash: str,
) -> HorizonManifest:
    """
    Cria o Manifest inicial de uma execução.

    ⚠️ Importante: esta função **não emite eventos implicitamente**.
    O Event Log inicia vazio e só é preenchido por chamadas explícitas
    a `add_event`, `node_started`, `node_finished` ou `node_failed`.

    Args:
        run_id (str): Identificador da execução.
        tenant (str): Tenant dono da execução.
        started_at (datetime): Timestamp de início.
        engine_version (str): Versão do Horizon Engine utilizada.
        config_hash (str): Hash da configuração efetiva.
        graph_hash (str): Hash estrutural do grafo executado.

    Returns:
        HorizonManifest: Manifest com `nodes` e `events` vazios.
    """
    started_at = _ensure_tzaware_utc(started_at)
    return HorizonManifest(
        run={
            "run_id": run_id,
            "tenant": tenant,
            "started_at": _iso(started_at),
            "engine_version": engine_version,
        },
        inputs={
            "config_hash": config_hash,
            "graph_hash": graph_hash,
        },
        nodes={},
        events=[],
    )


def add_event(
    manifest: HorizonManifest,
    *,
    event_type: str,
    ts: datetime,
    node_id: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Adiciona um evento explícito ao Event Log.

    A ordem de chamada é a ordem canônica do log; não há reordenação por
    timestamp.
    """
    ev: Dict[str, Any] = {"event_type": event_type, "timestamp": _iso(ts)}
    if node_id is not None:
        ev["node_id"] = node_id
    if payload is not None:
        ev["payload"] = payload
    manifest.events.append(ev)


def node_started(
    manifest: HorizonManifest,
    *,
    node_id: str,
    kind: str,
    ts: datetime,
) -> None:
    """Marca o nó como `running` e registra `node_started`."""
    ts = _ensure_tzaware_utc(ts)
    manifest.nodes.setdefault(node_id, {})
    manifest.nodes[node_id].update(
        {
            "node_id": node_id,
            "kind": kind,
            "status": "running",
            "started_at": _iso(ts),
        }
    )
    add_event(manifest, event_type="node_started", ts=ts, node_id=node_id, payload={"kind": kind})


def node_finished(
    manifest: HorizonManifest,
    *,
    node_id: str,
    ts: datetime,
    status: str = "success",
) -> None:
    """
    Registra a conclusão de um nó.

    `status` é `success` quando `resolve` produziu a saída e `fallback`
    quando a saída veio do caminho de recuperação. A duração é calculada a
    partir do `started_at` registrado por `node_started`.
    """
    ts = _ensure_tzaware_utc(ts)
    n = manifest.nodes.setdefault(node_id, {"node_id": node_id})
    started_iso = n.get("started_at")
    started_dt = datetime.fromisoformat(started_iso) if started_iso else ts
    n.update(
        {
            "status": status,
            "finished_at": _iso(ts),
            "duration_ms": _ms_between(started_dt, ts),
        }
    )
    add_event(
        manifest,
        event_type="node_finished",
        ts=ts,
        node_id=node_id,
        payload={"status": status, "duration_ms": n["duration_ms"]},
    )


def node_failed(
    manifest: HorizonManifest,
    *,
    node_id: str,
    ts: datetime,
    error: Dict[str, Any],
) -> None:
    """
    Registra a falha de `resolve` de um nó.

    A falha não encerra o nó: o Engine ainda registra `node_finished` com
    status `fallback` logo em seguida. `error` é o payload serializado
    (`HorizonErrorPayload.to_dict()`).
    """
    ts = _ensure_tzaware_utc(ts)
    n = manifest.nodes.setdefault(node_id, {"node_id": node_id})
    n["error"] = dict(error)
    add_event(manifest, event_type="node_failed", ts=ts, node_id=node_id, payload={"error": dict(error)})


def save_manifest(manifest: HorizonManifest, path: Path) -> None:
    """Persiste o Manifest em JSON determinístico (chaves ordenadas)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(manifest.to_dict(), ensure_ascii=False, indent=2, sort_keys=True, default=str),
        encoding="utf-8",
    )


def load_manifest(path: Path) -> HorizonManifest:
    data = json.loads(path.read_text(encoding="utf-8"))
    return HorizonManifest.from_dict(data)
