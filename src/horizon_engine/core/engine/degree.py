# src/horizon_engine/core/engine/degree.py
"""
Cálculo de graus do grafo de estágios.

Funções puras sobre nós e arestas, base da ordenação topológica. Os mapas
retornados preservam a ordem de declaração dos nós; ids que aparecem
apenas em arestas entram depois, na ordem em que são encontrados.

Limites explícitos:
    - Não valida se as extremidades das arestas existem (ver planner)
    - Não muta nós nem arestas
"""

from __future__ import annotations

from typing import Dict, Sequence

from horizon_engine.core.pipeline.runtime import SyntheticNode
from horizon_engine.core.pipeline.types import GraphEdge


def out_degree(nodes: Sequence[SyntheticNode], edges: Sequence[GraphEdge]) -> Dict[str, int]:
    """Número de arestas de saída por nó."""
    counts: Dict[str, int] = {n.node.id: 0 for n in nodes}
    for edge in edges:
        counts[edge.from_id] = counts.get(edge.from_id, 0) + 1
    return counts


def in_degree(nodes: Sequence[SyntheticNode], edges: Sequence[GraphEdge]) -> Dict[str, int]:
    """
    Número de arestas de entrada por nó.

    A origem de cada aresta também recebe uma entrada (0 por padrão), de
    modo que a fila do planner só seja semeada por nós com grau de entrada
    realmente nulo.
    """
    counts: Dict[str, int] = {n.node.id: 0 for n in nodes}
    for edge in edges:
        counts[edge.to_id] = counts.get(edge.to_id, 0) + 1
        counts.setdefault(edge.from_id, 0)
    return counts
