# src/horizon_engine/core/schema.py
"""
Validação estrutural de descrições declarativas de grafo.

Uma descrição declarativa chega como mapa simples (ex.: lida de YAML/JSON):

    {
        "plan_name": "...",
        "tenant_id": "...",
        "nodes": [{"id": "a", "kind": "ingest"}, ...],
        "edges": [{"from": "a", "to": "b"}, ...],
    }

Regras (v1):
    - plan_name: string com 1 a 80 caracteres
    - tenant_id: string com 3 a 120 caracteres
    - nodes: ao menos um nó; `id` não vazio; `kind` é um estágio válido
    - edges: lista (pode ser vazia); `from` e `to` não vazios

Limites explícitos:
    - Não verifica ciclos nem extremidades desconhecidas (responsabilidade
      do planner, na execução)
    - Não executa o grafo
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple

from horizon_engine.core.errors import GRAPH_INVALID_SCHEMA
from horizon_engine.core.exceptions import InvalidGraphSchemaError
from horizon_engine.core.graph import SyntheticGraph
from horizon_engine.core.pipeline.runtime import NodeRuntime, SyntheticNode
from horizon_engine.core.pipeline.types import GraphEdge, GraphNode, Stage


@dataclass(frozen=True)
class GraphSchema:
    plan_name: str
    tenant_id: str
    nodes: List[Tuple[str, Stage]] = field(default_factory=list)
    edges: List[Tuple[str, str]] = field(default_factory=list)


def _fail(message: str, **details: Any) -> InvalidGraphSchemaError:
    return InvalidGraphSchemaError(
        message=message,
        details={"type": GRAPH_INVALID_SCHEMA, **details},
        hint="Corrija a descrição do grafo antes de montar o plano.",
    )


def _bounded_str(value: Any, *, name: str, min_len: int, max_len: int) -> str:
    if not isinstance(value, str) or not (min_len <= len(value) <= max_len):
        raise _fail(
            f"{name} must be a string with {min_len}..{max_len} characters",
            field=name,
            received=repr(value),
        )
    return value


def parse_graph_schema(value: Any) -> GraphSchema:
    """
    Valida e normaliza uma descrição declarativa de grafo.

    Raises:
        InvalidGraphSchemaError: Em qualquer violação das regras do módulo.
    """
    if not isinstance(value, Mapping):
        raise _fail("graph schema must be a mapping", received=type(value).__name__)

    plan_name = _bounded_str(value.get("plan_name"), name="plan_name", min_len=1, max_len=80)
    tenant_id = _bounded_str(value.get("tenant_id"), name="tenant_id", min_len=3, max_len=120)

    raw_nodes = value.get("nodes")
    if not isinstance(raw_nodes, list) or not raw_nodes:
        raise _fail("nodes must be a non-empty list", field="nodes")

    nodes: List[Tuple[str, Stage]] = []
    for index, raw in enumerate(raw_nodes):
        if not isinstance(raw, Mapping):
            raise _fail("node must be a mapping", field=f"nodes[{index}]")
        nid = _bounded_str(raw.get("id"), name=f"nodes[{index}].id", min_len=1, max_len=10_000)
        try:
            kind = Stage(raw.get("kind"))
        except ValueError:
            raise _fail(
                "node kind must be a known stage",
                field=f"nodes[{index}].kind",
                received=repr(raw.get("kind")),
                allowed=[s.value for s in Stage],
            ) from None
        nodes.append((nid, kind))

    raw_edges = value.get("edges", [])
    if not isinstance(raw_edges, list):
        raise _fail("edges must be a list", field="edges")

    edges: List[Tuple[str, str]] = []
    for index, raw in enumerate(raw_edges):
        if not isinstance(raw, Mapping):
            raise _fail("edge must be a mapping", field=f"edges[{index}]")
        src = _bounded_str(raw.get("from"), name=f"edges[{index}].from", min_len=1, max_len=10_000)
        dst = _bounded_str(raw.get("to"), name=f"edges[{index}].to", min_len=1, max_len=10_000)
        edges.append((src, dst))

    return GraphSchema(plan_name=plan_name, tenant_id=tenant_id, nodes=nodes, edges=edges)


def graph_from_schema(schema: GraphSchema, runtimes: Mapping[str, NodeRuntime]) -> SyntheticGraph:
    """
    Monta um SyntheticGraph (com arestas) a partir de um schema validado.

    Cada nó é pareado com `runtimes[node_id]`. O rótulo das arestas segue
    `"{from_kind}:to:{to_kind}"` quando ambos os nós são conhecidos.

    Raises:
        InvalidGraphSchemaError: Se faltar runtime para algum nó.
    """
    missing = [nid for nid, _ in schema.nodes if nid not in runtimes]
    if missing:
        raise _fail("missing runtime for node(s)", field="runtimes", missing=missing)

    graph_nodes: Dict[str, GraphNode] = {}
    entries: List[SyntheticNode] = []
    for index, (nid, kind) in enumerate(schema.nodes):
        node = GraphNode(
            id=nid,
            kind=kind,
            state={"tenant": schema.tenant_id, "plan": schema.plan_name},
            weight=f"{index}::{kind.value}",
        )
        graph_nodes[nid] = node
        entries.append(SyntheticNode(node=node, runtime=runtimes[nid]))

    edges: List[GraphEdge] = []
    for src, dst in schema.edges:
        if src in graph_nodes and dst in graph_nodes:
            edges.append(GraphEdge.between(graph_nodes[src], graph_nodes[dst]))
        else:
            edges.append(GraphEdge(from_id=src, to_id=dst))

    return SyntheticGraph(entries, edges)
