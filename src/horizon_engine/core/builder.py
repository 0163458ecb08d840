# src/horizon_engine/core/builder.py
"""
Builder do grafo de estágios.

Este módulo transforma uma lista ordenada de contratos de estágio em um
`SyntheticGraph`, atribuindo identificadores sintéticos e runtimes.

Para cada contrato, na ordem recebida:
    - id do nó:   `"{run_id}:{kind}:{index}"`
    - peso:       `"{index}::{kind}"` (rótulo diagnóstico)
    - estado:     `{"tenant", "run_id", "contract"}`
    - runtime:    `resolve` chama `contract.execute` e envelopa a primeira saída

Decisões arquiteturais:
    - O Builder não emite arestas: a ordem de execução de grafos montados
      aqui é a ordem dos contratos. Grafos com arestas são montados por
      `core.schema.graph_from_schema`
    - Cada chamada a `resolve` cria um token de cancelamento próprio, que
      nunca é sinalizado; ele não está ligado ao `signal` do Engine

Limites explícitos:
    - Não executa o grafo
    - Não valida ids (ver planner)
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from horizon_engine.core.graph import SyntheticGraph
from horizon_engine.core.pipeline.contract import StageContract
from horizon_engine.core.pipeline.runtime import CallableRuntime, SyntheticNode
from horizon_engine.core.pipeline.types import DEFAULT_STAGE_WINDOW, GraphNode, NodeInput, Stage


DEFAULT_TENANT = "tenant-001"
DEFAULT_RUN_ID = "seed"


def _stage_of(contract: StageContract) -> Stage:
    return contract.kind if isinstance(contract.kind, Stage) else Stage(contract.kind)


def _envelope(stage: Stage, contract: StageContract, node_input: NodeInput) -> Dict[str, Any]:
    return {
        "stage": stage.value,
        "contract": contract.id,
        "tenant": node_input.tenant,
        "run_id": node_input.run_id,
    }


def _fallback_envelope(stage: Stage, contract: StageContract, node_input: NodeInput) -> Dict[str, Any]:
    out = _envelope(stage, contract, node_input)
    out["fallback"] = True
    out["run_payload"] = node_input.payload
    return out


def _runtime_for(contract: StageContract, stage: Stage) -> CallableRuntime:
    async def resolve(node_input: NodeInput) -> Dict[str, Any]:
        emitted = await contract.execute([contract.defaults], asyncio.Event())
        primary = emitted[0] if emitted else None
        if primary is not None:
            out = _envelope(stage, contract, node_input)
            out["selected"] = primary
            out["run_payload"] = node_input.payload
            return out
        return _fallback_envelope(stage, contract, node_input)

    def fallback(node_input: NodeInput) -> Dict[str, Any]:
        return _fallback_envelope(stage, contract, node_input)

    return CallableRuntime(resolver=resolve, fallback=fallback)


def from_signals(tenant: str, run_id: str, contracts: Sequence[StageContract]) -> SyntheticGraph:
    """
    Monta um grafo sem arestas a partir de contratos de estágio.

    Args:
        tenant (str): Tenant dono da execução.
        run_id (str): Identificador usado como prefixo dos ids de nó.
        contracts (Sequence[StageContract]): Contratos na ordem desejada.

    Returns:
        SyntheticGraph: um nó por contrato, nenhuma aresta.

    Raises:
        ValueError: Se o `kind` de algum contrato não for um estágio válido.
    """
    nodes: List[SyntheticNode] = []
    for index, contract in enumerate(contracts):
        stage = _stage_of(contract)
        nodes.append(
            SyntheticNode(
                node=GraphNode(
                    id=f"{run_id}:{stage.value}:{index}",
                    kind=stage,
                    state={"tenant": tenant, "run_id": run_id, "contract": contract.id},
                    weight=f"{index}::{stage.value}",
                ),
                runtime=_runtime_for(contract, stage),
            )
        )
    return SyntheticGraph(nodes, ())


def build_graph_from_contracts(
    contracts: Sequence[StageContract],
    config: Optional[Mapping[str, Any]] = None,
) -> SyntheticGraph:
    """
    Monta o grafo usando tenant/run_id padrão da configuração.

    Chaves lidas (todas opcionais):
        - engine.default_tenant (padrão "tenant-001")
        - engine.default_run_id (padrão "seed")
        - engine.stage_window: quando presente, apenas contratos cujo
          estágio pertence à janela entram no grafo (lista vazia: nenhum)
    """
    engine_cfg = dict((config or {}).get("engine", {}) or {})
    tenant = str(engine_cfg.get("default_tenant", DEFAULT_TENANT))
    run_id = str(engine_cfg.get("default_run_id", DEFAULT_RUN_ID))

    window = engine_cfg.get("stage_window")
    if window is not None:
        allowed = {Stage(s) for s in window}
        contracts = [c for c in contracts if _stage_of(c) in allowed]

    return from_signals(tenant, run_id, contracts)


# ----------------------------------------------------------------------
# Planos a partir de templates
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class PluginSpan:
    stage: Stage
    label: str
    started_at: int
    duration_ms: int = 0


@dataclass(frozen=True)
class HorizonPlan:
    """Plano de execução derivado de um template (tenant + versão)."""

    id: str
    tenant_id: str
    started_at: int
    plugin_span: PluginSpan
    payload: Dict[str, Any] = field(default_factory=dict)


def create_plan_from_template(
    template: Mapping[str, Any],
    stage_window: Sequence[Stage] = (),
) -> HorizonPlan:
    """
    Cria um HorizonPlan a partir de um template `{"tenant", "version"}`.

    O span inicial aponta para o primeiro estágio da janela (ou `ingest`
    quando a janela é vazia), com rótulo `"{STAGE}_STAGE"` e duração 0.
    """
    window = [s if isinstance(s, Stage) else Stage(s) for s in stage_window]
    first = window[0] if window else Stage.INGEST
    now = int(time.time() * 1000)
    tenant = template["tenant"]
    return HorizonPlan(
        id=f"plan:{tenant}:{template['version']}:{now}",
        tenant_id=tenant,
        started_at=now,
        plugin_span=PluginSpan(
            stage=first,
            label=f"{first.value.upper()}_STAGE",
            started_at=now,
            duration_ms=0,
        ),
        payload={
            "stage_window": window,
            "template": dict(template),
        },
    )


# ----------------------------------------------------------------------
# Helpers sobre listas de contratos
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class StageConstraint:
    stage: Stage
    required: bool
    reason: Optional[str] = None


def collect_contracts_by_stage(contracts: Sequence[StageContract]) -> Dict[Stage, List[StageContract]]:
    """Agrupa contratos por estágio; todos os estágios aparecem (listas vazias)."""
    buckets: Dict[Stage, List[StageContract]] = {stage: [] for stage in DEFAULT_STAGE_WINDOW}
    for contract in contracts:
        buckets[_stage_of(contract)].append(contract)
    return buckets


def collect_kinds(contracts: Sequence[StageContract]) -> List[Stage]:
    """Estágios distintos, na ordem da primeira ocorrência."""
    seen: List[Stage] = []
    for contract in contracts:
        stage = _stage_of(contract)
        if stage not in seen:
            seen.append(stage)
    return seen


def extract_contract_ids(contracts: Sequence[StageContract]) -> List[str]:
    return [f"{_stage_of(c).value}-{c.id}" for c in contracts]


def collect_constraints(stages: Sequence[Stage]) -> List[StageConstraint]:
    """Toda etapa da janela é obrigatória (`reason = "must:{stage}"`)."""
    out: List[StageConstraint] = []
    for stage in stages:
        s = stage if isinstance(stage, Stage) else Stage(stage)
        out.append(StageConstraint(stage=s, required=True, reason=f"must:{s.value}"))
    return out
