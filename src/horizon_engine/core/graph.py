# src/horizon_engine/core/graph.py
"""
Grafo sintético de estágios.

`SyntheticGraph` é a fachada imutável sobre nós (pares nó + runtime) e
arestas. Ele não implementa algoritmos: delega graus ao módulo `degree`,
ordenação ao `planner` e execução ao `engine`.

Invariantes:
    - Nós e arestas são fixados na construção (tuplas)
    - O grafo pode ser reutilizado em várias execuções, inclusive
      concorrentes, pois nenhuma execução o modifica
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

from horizon_engine.core.engine.degree import in_degree, out_degree
from horizon_engine.core.engine.engine import ExecutionOptions, execute_graph
from horizon_engine.core.engine.planner import topological_order
from horizon_engine.core.pipeline.runtime import SyntheticNode
from horizon_engine.core.pipeline.types import ExecutionResult, GraphEdge, NodeInput

T = TypeVar("T")


class SyntheticGraph:
    """Grafo dirigido de estágios, pronto para ordenação e execução."""

    def __init__(self, nodes: Iterable[SyntheticNode], edges: Iterable[GraphEdge] = ()):
        self._nodes: Tuple[SyntheticNode, ...] = tuple(nodes)
        self._edges: Tuple[GraphEdge, ...] = tuple(edges)

    def __repr__(self) -> str:
        return f"SyntheticGraph(nodes={len(self._nodes)}, edges={len(self._edges)})"

    @property
    def nodes(self) -> Tuple[SyntheticNode, ...]:
        return self._nodes

    @property
    def edges(self) -> Tuple[GraphEdge, ...]:
        return self._edges

    def node(self, node_id: str) -> SyntheticNode:
        for entry in self._nodes:
            if entry.node.id == node_id:
                return entry
        raise KeyError(node_id)

    def map_nodes(self, mapper: Callable[[SyntheticNode, int], T]) -> List[T]:
        return [mapper(entry, index) for index, entry in enumerate(self._nodes)]

    def out_degree(self) -> Dict[str, int]:
        return out_degree(self._nodes, self._edges)

    def in_degree(self) -> Dict[str, int]:
        return in_degree(self._nodes, self._edges)

    def topo(self) -> List[str]:
        """Ordem topológica determinística (levanta CycleDetectedError em ciclos)."""
        return topological_order(self._nodes, self._edges)

    async def execute(
        self,
        input: NodeInput,
        options: Optional[ExecutionOptions] = None,
    ) -> ExecutionResult:
        return await execute_graph(self, input, options)

    def dispose(self) -> None:
        """Libera os runtimes de todos os nós (chamada explícita do dono do grafo)."""
        for entry in self._nodes:
            entry.runtime.dispose()

    @classmethod
    def from_signals(cls, tenant: str, run_id: str, contracts: Sequence[Any]) -> "SyntheticGraph":
        from horizon_engine.core.builder import from_signals

        return from_signals(tenant, run_id, contracts)
