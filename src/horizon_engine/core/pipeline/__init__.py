# src/horizon_engine/core/pipeline/__init__.py
"""
Contratos e estruturas fundamentais do grafo de estágios.

- **types**: `Stage`, `GraphNode`, `GraphEdge`, `NodeInput`, `Snapshot`,
  `Timeline`, `ExecutionResult`, `RunSummary`
- **runtime**: `NodeRuntime` (Protocol), `CallableRuntime`, `SyntheticNode`
- **contract**: `StageContract` (Protocol) consumido pelo Builder
- **context**: `ExecutionContext` (log estruturado, warnings, Manifest)

Runtimes não conhecem o Engine nem o planner, e não controlam a ordem de
execução.
"""
