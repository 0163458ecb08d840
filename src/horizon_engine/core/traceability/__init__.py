# src/horizon_engine/core/traceability/__init__.py
"""
Rastreabilidade do Horizon Engine.

Expõe o Manifest de execução e seu Event Log. O Engine só escreve no
Manifest quando o chamador fornece um (`ExecutionContext.manifest`).
"""

from .manifest import (
    HorizonManifest,
    compute_graph_hash,
    create_manifest,
    add_event,
    node_started,
    node_finished,
    node_failed,
    save_manifest,
    load_manifest,
)

__all__ = [
    "HorizonManifest",
    "compute_graph_hash",
    "create_manifest",
    "add_event",
    "node_started",
    "node_finished",
    "node_failed",
    "save_manifest",
    "load_manifest",
]
