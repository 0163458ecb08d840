# src/horizon_engine/core/config/__init__.py
"""
Camada de configuração do Horizon Engine.

Responsabilidades:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Deep-merge determinístico
    - Validação das seções `engine` e `stages`
    - Hash canônico para o Manifest
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash
from .loader import load_config, validate_engine_config
from .merge import deep_merge

__all__ = [
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "InvalidConfigRootTypeError",
    "UnsupportedConfigFormatError",
    "compute_config_hash",
    "deep_merge",
    "load_config",
    "validate_engine_config",
]
