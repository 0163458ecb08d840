# src/horizon_engine/core/engine/planner.py
"""
Planejador de execução do grafo de estágios (DAG).

Este módulo valida a estrutura do grafo e produz uma ordem de execução
topológica determinística dos nós.

O planner opera exclusivamente em nível estrutural, analisando:
    - identificadores de nós
    - extremidades das arestas
    - formação de ciclos

Decisões arquiteturais:
    - Utiliza o algoritmo de Kahn com fila FIFO
    - Empates são resolvidos pela ordem de declaração dos nós
    - Erros estruturais são tratados como falhas fatais

Invariantes:
    - Nenhum nó aparece antes de suas dependências
    - Todos os nós aparecem exatamente uma vez
    - O mesmo grafo produz sempre a mesma ordem

Limites explícitos:
    - Não executa nós
    - Não interage com ExecutionContext ou Manifest
    - Não decide políticas de execução
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Dict, List, Sequence

from horizon_engine.core.errors import (
    HorizonErrorPayload,
    graph_cycle_detected,
    graph_unknown_node,
)
from horizon_engine.core.pipeline.runtime import SyntheticNode
from horizon_engine.core.pipeline.types import GraphEdge

from .degree import in_degree


CYCLE_MESSAGE = "synthetic graph contains cycle"


class GraphStructureError(ValueError):
    """Base dos erros estruturais do grafo; carrega o payload canônico."""

    def __init__(self, message: str, error: HorizonErrorPayload | None = None):
        super().__init__(message)
        self.error = error


class CycleDetectedError(GraphStructureError):
    """
    Exceção levantada quando o grafo contém um ciclo.

    Nenhuma ordem parcial é retornada e nenhum nó chega a executar.
    """


class UnknownNodeError(GraphStructureError):
    """Exceção levantada quando uma aresta referencia um nó inexistente."""


class DuplicateNodeIdError(GraphStructureError):
    """Exceção levantada quando dois nós compartilham o mesmo id."""


def _validate_structure(nodes: Sequence[SyntheticNode], edges: Sequence[GraphEdge]) -> None:
    seen = set()
    for n in nodes:
        nid = n.node.id
        if not isinstance(nid, str) or not nid.strip():
            raise ValueError("node.id must be a non-empty string")
        if nid in seen:
            raise DuplicateNodeIdError(f"Duplicate node id: {nid}")
        seen.add(nid)

    for edge in edges:
        missing = [x for x in (edge.from_id, edge.to_id) if x not in seen]
        if missing:
            raise UnknownNodeError(
                f"Edge '{edge.from_id}' -> '{edge.to_id}' references unknown node(s): {missing}",
                graph_unknown_node(edge={"from": edge.from_id, "to": edge.to_id}, missing=missing),
            )


def topological_order(nodes: Sequence[SyntheticNode], edges: Sequence[GraphEdge]) -> List[str]:
    """
    Valida e produz a ordem topológica determinística dos nós.

    Algoritmo (Kahn):
        1. Copia o mapa de graus de entrada e monta a adjacência `from -> [to]`
        2. Semeia uma fila FIFO com todo nó de grau de entrada 0
        3. Retira da fila, acrescenta à ordem e decrementa os vizinhos;
           vizinhos que chegam a 0 entram na fila
        4. Se a ordem não cobre todos os nós, há ciclo

    Args:
        nodes (Sequence[SyntheticNode]): Nós na ordem de declaração.
        edges (Sequence[GraphEdge]): Arestas dirigidas do grafo.

    Returns:
        List[str]: ids dos nós em ordem de execução.

    Raises:
        ValueError: Se algum nó possuir `id` vazio.
        DuplicateNodeIdError: Se houver ids repetidos.
        UnknownNodeError: Se uma aresta referenciar nó inexistente.
        CycleDetectedError: Se houver ciclo.
    """
    _validate_structure(nodes, edges)

    degree: Dict[str, int] = dict(in_degree(nodes, edges))
    adjacency: Dict[str, List[str]] = {}
    for edge in edges:
        adjacency.setdefault(edge.from_id, []).append(edge.to_id)

    queue: Deque[str] = deque(nid for nid, value in degree.items() if value == 0)
    ordered: List[str] = []

    while queue:
        nid = queue.popleft()
        ordered.append(nid)
        for nxt in adjacency.get(nid, []):
            degree[nxt] -= 1
            if degree[nxt] == 0:
                queue.append(nxt)

    if len(ordered) != len(nodes):
        raise CycleDetectedError(
            CYCLE_MESSAGE,
            graph_cycle_detected(node_count=len(nodes), ordered_count=len(ordered)),
        )

    return ordered
