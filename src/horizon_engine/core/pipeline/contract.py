# src/horizon_engine/core/pipeline/contract.py
"""
Contrato de estágio consumido pelo Builder.

Um contrato de estágio é fornecido por uma camada externa de montagem de
planos e descreve:
    - id: identificador estável do contrato
    - kind: estágio do contrato (`Stage` ou seu valor textual)
    - defaults: configuração padrão do estágio
    - execute(configs, signal): corrotina que emite uma lista de saídas

O Builder transforma cada contrato em um nó + runtime; o contrato em si
não conhece o grafo nem o Engine.
"""

from __future__ import annotations

import asyncio
from typing import Any, List, Protocol, Sequence, Union, runtime_checkable

from .types import Stage


@runtime_checkable
class StageContract(Protocol):
    id: str
    kind: Union[Stage, str]
    defaults: Any

    async def execute(self, configs: Sequence[Any], signal: asyncio.Event) -> List[Any]:
        """Executa o estágio para as configs fornecidas."""
        ...
