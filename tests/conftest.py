# tests/conftest.py
"""
Fixtures compartilhados para testes do Horizon Engine.

Este módulo define fixtures reutilizáveis que fornecem:
- entrada de execução determinística (NodeInput)
- runtimes de nó dummy (duck typing, sem herança)
- contratos de estágio dummy para o Builder
- contexto de execução controlado (ExecutionContext)
- YAMLs de configuração semelhantes ao uso real

Decisões arquiteturais:
    - Runtimes e contratos dummy registram chamadas para inspeção nos testes
    - Imports do core são feitos de forma lazy para que falhas de import
      apareçam no teste, não na coleta
    - Nenhuma fixture realiza I/O

Limites explícitos:
    - Não substituir testes de integração
    - Não conter lógica de domínio
"""

import pytest
from datetime import datetime, timezone


# =====================================================
# Config fixtures
# =====================================================

@pytest.fixture
def engine_config_defaults_yaml() -> str:
    """
    YAML de configuração padrão (defaults), no formato de `config/config.defaults.yaml`.

    Returns:
        str: Conteúdo YAML com as seções `engine` e `stages`.
    """
    return """\
engine:
  default_tenant: tenant-001
  default_run_id: seed
  stage_window: [ingest, analyze, resolve, optimize, execute]
  dispose_on_exit: false
stages:
  ingest:
    enabled: true
  analyze:
    enabled: true
"""


@pytest.fixture
def engine_config_local_yaml() -> str:
    """YAML de override local: restringe a janela e desabilita `analyze`."""
    return """\
engine:
  stage_window: [ingest, analyze]
stages:
  analyze:
    enabled: false
"""


# =====================================================
# Execution fixtures
# =====================================================

@pytest.fixture
def node_input():
    """
    Entrada compartilhada determinística para execuções de grafo.

    O mesmo payload é entregue a todos os nós pelo Engine.
    """
    from horizon_engine.core.pipeline.types import NodeInput

    return NodeInput(
        tenant="tenant-001",
        run_id="run-test-001",
        payload={"incident": "inc-42"},
    )


@pytest.fixture
def dummy_ctx():
    """
    ExecutionContext com run_id e timestamp fixos.

    Invariantes:
        - O timestamp é timezone-aware (UTC)
        - O contexto inicia sem eventos nem warnings
        - Nenhum Manifest associado (testes que precisam criam o seu)
    """
    from horizon_engine.core.pipeline.context import ExecutionContext

    return ExecutionContext(
        run_id="run-test-001",
        created_at=datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc),
        config={},
        meta={"source": "pytest"},
    )


@pytest.fixture
def DummyRuntime():
    """
    Fixture factory que fornece uma classe de runtime duck-typed.

    A implementação retornada:
    - devolve `output` em `resolve` ou levanta RuntimeError("boom") se `fails`
    - expõe `fallback` (None por padrão)
    - registra chamadas em `calls` e descartes em `disposed`

    Returns:
        type: Classe _DummyRuntime instanciável pelos testes.
    """

    class _DummyRuntime:
        def __init__(self, output=None, fails=False, fallback=None):
            self.output = output
            self.fails = fails
            self.fallback = fallback
            self.calls = []
            self.disposed = 0

        async def resolve(self, input):
            self.calls.append(input)
            if self.fails:
                raise RuntimeError("boom")
            return self.output

        def dispose(self):
            self.disposed += 1

    return _DummyRuntime


@pytest.fixture
def make_node(DummyRuntime):
    """
    Factory de SyntheticNode com runtime dummy.

    Por padrão o runtime devolve `{"stage": <kind>}`; `fails=True` faz
    `resolve` levantar exceção.
    """
    from horizon_engine.core.pipeline.runtime import SyntheticNode
    from horizon_engine.core.pipeline.types import GraphNode, Stage

    def _make(node_id, kind, output=None, fails=False, fallback=None, runtime=None):
        stage = Stage(kind)
        rt = runtime or DummyRuntime(
            output={"stage": stage.value} if output is None else output,
            fails=fails,
            fallback=fallback,
        )
        return SyntheticNode(node=GraphNode(id=node_id, kind=stage, state={}, weight=""), runtime=rt)

    return _make


@pytest.fixture
def edge():
    """Factory curta de GraphEdge (`edge("A", "B")`)."""
    from horizon_engine.core.pipeline.types import GraphEdge

    def _edge(src, dst):
        return GraphEdge(from_id=src, to_id=dst, label=f"{src}->{dst}")

    return _edge


@pytest.fixture
def DummyContract():
    """
    Fixture factory de contrato de estágio duck-typed.

    `execute` devolve `emitted` (lista) e registra os argumentos recebidos
    em `received` para inspeção: configs e token de cancelamento.
    """

    class _DummyContract:
        def __init__(self, contract_id, kind, defaults=None, emitted=None, fails=False):
            self.id = contract_id
            self.kind = kind
            self.defaults = defaults if defaults is not None else {"phase": kind}
            self.emitted = [{"emitted": kind}] if emitted is None else emitted
            self.fails = fails
            self.received = []

        async def execute(self, configs, signal):
            self.received.append((list(configs), signal))
            if self.fails:
                raise RuntimeError("contract failed")
            return list(self.emitted)

    return _DummyContract
