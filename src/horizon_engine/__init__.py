# src/horizon_engine/__init__.py
"""
Horizon Engine — motor de execução de grafos de estágios (DAG).

Dado um conjunto de nós tipados (ingest, analyze, resolve, optimize,
execute) e arestas de dependência, o Horizon Engine:
    - calcula uma ordem de execução válida (Kahn, com detecção de ciclo)
    - executa cada nó sobre uma entrada compartilhada, um por vez
    - recupera falhas de nó via fallback, sem abortar a execução
    - devolve snapshots por nó e uma timeline ordenada

Arquitetura em alto nível:
    - core.pipeline     → tipos, runtimes de nó, contratos e contexto
    - core.engine       → graus, planner (ordenação) e execução
    - core.graph        → fachada imutável `SyntheticGraph`
    - core.builder      → montagem de grafos a partir de contratos
    - core.schema       → validação de descrições declarativas
    - core.config       → carregamento, merge e hash de configuração
    - core.traceability → Manifest e Event Log

Limites explícitos:
    - Não executa ramos independentes em paralelo
    - Não persiste grafos
    - Não executa de forma distribuída
"""

from .core.builder import build_graph_from_contracts, create_plan_from_template, from_signals
from .core.engine.engine import ExecutionAbortedError, ExecutionOptions, execute_graph
from .core.engine.planner import CycleDetectedError, UnknownNodeError
from .core.graph import SyntheticGraph
from .core.pipeline.runtime import CallableRuntime, SyntheticNode
from .core.pipeline.types import (
    ExecutionResult,
    GraphEdge,
    GraphNode,
    NodeInput,
    Snapshot,
    Stage,
    Timeline,
)

__version__ = "0.1.0"

__all__ = [
    "CallableRuntime",
    "CycleDetectedError",
    "ExecutionAbortedError",
    "ExecutionOptions",
    "ExecutionResult",
    "GraphEdge",
    "GraphNode",
    "NodeInput",
    "Snapshot",
    "Stage",
    "SyntheticGraph",
    "SyntheticNode",
    "Timeline",
    "UnknownNodeError",
    "build_graph_from_contracts",
    "create_plan_from_template",
    "execute_graph",
    "from_signals",
]
