# src/horizon_engine/core/pipeline/runtime.py
"""
Contrato canônico de runtime de nó do Horizon Engine.

Cada nó do grafo é pareado com um runtime, responsável por produzir a
saída do nó a partir da entrada compartilhada da execução.

Responsabilidades de um runtime:
    - `resolve(input)`: computação principal (assíncrona, pode falhar)
    - `fallback(input)`: saída substituta opcional, usada quando `resolve` falha
    - `dispose()`: gancho de ciclo de vida para liberar recursos

Princípios fundamentais:
    - Runtimes não conhecem o Engine nem o planner
    - Runtimes não controlam ordem de execução
    - Conformidade é garantida por duck typing (@runtime_checkable)

Limites explícitos:
    - Não contém lógica de planejamento
    - Não registra eventos de rastreabilidade
    - Não decide políticas de execução (filtro, cancelamento)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Protocol, runtime_checkable

from .types import GraphNode, NodeInput


@runtime_checkable
class NodeRuntime(Protocol):
    """
    Contrato mínimo de um runtime de nó.

    Atributos obrigatórios:
        - fallback: callable opcional (`None` quando não há fallback)

    Invariantes:
        - `resolve` é chamado no máximo uma vez por nó por execução
        - `fallback` só é chamado quando `resolve` levanta exceção
        - `dispose` não é chamado automaticamente, salvo quando a execução
          é configurada com `dispose_on_exit`
    """
    fallback: Optional[Callable[[NodeInput], Any]]

    async def resolve(self, input: NodeInput) -> Any:
        """Produz a saída do nó a partir da entrada compartilhada."""
        ...

    def dispose(self) -> None:
        ...


def _noop() -> None:
    return None


@dataclass(frozen=True)
class CallableRuntime:
    """Runtime montado a partir de funções soltas.

    Usado pelo Builder e útil em testes: evita declarar uma classe por nó.
    """

    resolver: Callable[[NodeInput], Awaitable[Any]]
    fallback: Optional[Callable[[NodeInput], Any]] = None
    on_dispose: Callable[[], None] = _noop

    async def resolve(self, input: NodeInput) -> Any:
        return await self.resolver(input)

    def dispose(self) -> None:
        self.on_dispose()


@dataclass(frozen=True)
class SyntheticNode:
    """Par nó + runtime, unidade armazenada pelo grafo."""

    node: GraphNode
    runtime: NodeRuntime

    @property
    def id(self) -> str:
        return self.node.id
