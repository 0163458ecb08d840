# src/horizon_engine/core/config/hashing.py
"""
Hash canônico da configuração efetiva.

O hash identifica a configuração usada em uma execução e é registrado em
`HorizonManifest.inputs.config_hash`. O mesmo esquema (JSON com chaves
ordenadas e separadores compactos, SHA-256) é usado para o hash
estrutural do grafo.
"""

import hashlib
import json
from typing import Any, Mapping


def canonical_sha256(value: Any) -> str:
    """SHA-256 hexadecimal da serialização JSON canônica de `value`."""
    encoded = json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


def compute_config_hash(config: Mapping[str, Any]) -> str:
    """
    Raises:
        TypeError: Se `config` não for um mapa.
    """
    if not isinstance(config, Mapping):
        raise TypeError(f"config hash expects a mapping, got {type(config).__name__}")
    return canonical_sha256(dict(config))
