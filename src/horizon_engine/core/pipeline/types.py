# src/horizon_engine/core/pipeline/types.py
"""
Tipos canônicos do grafo de estágios do Horizon Engine.

Este módulo define as estruturas e enums fundamentais que padronizam a
comunicação entre Builder, planner, Engine e camadas de rastreabilidade.

Os tipos aqui definidos representam:
    - os estágios canônicos de processamento
    - nós e arestas do grafo (value types, sem comportamento)
    - a entrada compartilhada de uma execução
    - snapshots, timeline e resultado agregado de uma execução

Princípios fundamentais:
    - Tipos são imutáveis (frozen) e serializáveis
    - Nenhuma lógica de execução vive neste módulo
    - Nenhuma validação ocorre na construção (ver `core.engine.planner`)

Limites explícitos:
    - Não executa nós
    - Não ordena o grafo
    - Não decide políticas de execução

Este módulo existe para garantir consistência,
interoperabilidade e clareza semântica no grafo de estágios.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class Stage(str, Enum):
    """
    Estágios canônicos de um grafo de recuperação.

    Os valores são strings para facilitar:
        - serialização em JSON
        - composição de eventos da timeline (`"{node_id}:{stage}"`)
        - persistência em Manifest

    Tipos definidos:
        - INGEST: coleta de sinais de entrada
        - ANALYZE: análise dos sinais coletados
        - RESOLVE: resolução de dependências e alvos
        - OPTIMIZE: otimização do plano
        - EXECUTE: execução das ações

    Invariantes:
        - Todo nó possui exatamente um `kind`
        - O valor textual do enum é estável e canônico

    Limites explícitos:
        - O estágio não define ordem de execução (apenas arestas definem)
    """
    INGEST = "ingest"
    ANALYZE = "analyze"
    RESOLVE = "resolve"
    OPTIMIZE = "optimize"
    EXECUTE = "execute"


DEFAULT_STAGE_WINDOW: List[Stage] = [
    Stage.INGEST,
    Stage.ANALYZE,
    Stage.RESOLVE,
    Stage.OPTIMIZE,
    Stage.EXECUTE,
]


@dataclass(frozen=True)
class GraphNode:
    """
    Nó do grafo: um estágio de processamento.

    Campos:
        - id: identificador único dentro do grafo
        - kind: estágio semântico do nó
        - state: configuração estática associada ao nó
        - weight: rótulo diagnóstico (não participa da ordenação)
    """
    id: str
    kind: Stage
    state: Any = None
    weight: str = ""


@dataclass(frozen=True)
class GraphEdge:
    """Aresta dirigida: `from_id` deve concluir antes de `to_id` iniciar."""

    from_id: str
    to_id: str
    label: str = ""

    @classmethod
    def between(cls, upstream: GraphNode, downstream: GraphNode) -> "GraphEdge":
        return cls(
            from_id=upstream.id,
            to_id=downstream.id,
            label=f"{upstream.kind.value}:to:{downstream.kind.value}",
        )


@dataclass(frozen=True)
class NodeInput:
    """
    Entrada compartilhada de uma execução.

    O mesmo `payload` é entregue a todos os nós; cada nó é um leitor
    independente do payload e de sua própria configuração estática.
    """
    tenant: str
    run_id: str
    payload: Any = None


@dataclass(frozen=True)
class Snapshot:
    """Resultado registrado de um nó executado (timestamp em epoch ms)."""

    run_id: str
    started_at: int
    input: Any
    output: Any


@dataclass(frozen=True)
class Timeline:
    """
    Trilha de auditoria ordenada de uma execução.

    Campos:
        - stages: estágio de cada nó executado, na ordem de execução
        - ordered: ids dos nós executados, na ordem de execução
        - events: `"{node_id}:{stage}"` por nó executado
    """
    stages: List[Stage] = field(default_factory=list)
    ordered: List[str] = field(default_factory=list)
    events: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ExecutionResult:
    """
    Resultado agregado de uma chamada a `execute`.

    Além de snapshots e timeline, expõe o mapa de saídas por nó e a lista
    de nós servidos pelo caminho de fallback (incluindo a substituição por
    `{}`), para que consumidores detectem estágios degradados sem precisar
    inspecionar cada saída.
    """
    snapshots: List[Snapshot] = field(default_factory=list)
    timeline: Timeline = field(default_factory=Timeline)
    outputs: Dict[str, Any] = field(default_factory=dict)
    fallbacks: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RunSummary:
    """Resumo numérico de uma execução (para relatórios e painéis)."""

    run_id: str
    tenant: str
    stage_count: int
    ok_count: int
    fallback_count: int
    elapsed_ms: int = 0
