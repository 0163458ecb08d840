# src/horizon_engine/core/config/loader.py
"""
Loader de configuração do Horizon Engine.

A configuração efetiva é resolvida a partir de:
    - um arquivo de defaults (obrigatório)
    - um arquivo local de overrides (opcional; ignorado se não existir)

Depois do merge, as seções conhecidas pelo Engine são validadas:

    engine:
      default_tenant: tenant-001
      default_run_id: seed
      stage_window: [ingest, analyze, resolve, optimize, execute]
      dispose_on_exit: false
    stages:
      analyze:
        enabled: true

Chaves desconhecidas são preservadas sem validação.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import json
import yaml  # PyYAML

from horizon_engine.core.errors import engine_configuration_error
from horizon_engine.core.exceptions import EngineConfigurationError
from horizon_engine.core.pipeline.types import Stage

from .merge import deep_merge
from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)


_STAGE_VALUES = [s.value for s in Stage]


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Lê um arquivo YAML/JSON e garante que a raiz é um dict.

    Arquivos vazios são interpretados como `{}`.

    Raises:
        DefaultsNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se a extensão não for suportada.
        InvalidConfigRootTypeError: Se a raiz não for um dicionário.
    """
    if not path.exists():
        raise DefaultsNotFoundError(f"Arquivo de defaults não encontrado: {path}")

    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    elif suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    else:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(data).__name__}"
        )

    return data


def _invalid(message: str, **details: Any) -> EngineConfigurationError:
    payload = engine_configuration_error(message=message, details=details)
    return EngineConfigurationError(
        message=payload.message,
        details={"type": payload.type, **payload.details},
        hint=payload.hint,
    )


def validate_engine_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Valida as seções `engine` e `stages` da configuração efetiva.

    Returns:
        Dict[str, Any]: a própria configuração (sem cópia).

    Raises:
        EngineConfigurationError: estágio desconhecido em `stage_window` ou
            `stages`, seção com tipo inválido, `stages.<kind>` que não é mapa
            ou `enabled` não booleano.
    """
    engine_cfg = config.get("engine", {})
    if engine_cfg is None:
        engine_cfg = {}
    if not isinstance(engine_cfg, dict):
        raise _invalid("Seção `engine` deve ser um mapa", received=type(engine_cfg).__name__)

    window = engine_cfg.get("stage_window")
    if window is not None:
        if not isinstance(window, list):
            raise _invalid("`engine.stage_window` deve ser uma lista", received=type(window).__name__)
        unknown = [s for s in window if s not in _STAGE_VALUES]
        if unknown:
            raise _invalid("Estágio desconhecido em `engine.stage_window`", unknown=unknown, allowed=_STAGE_VALUES)

    stages_cfg = config.get("stages", {})
    if stages_cfg is None:
        stages_cfg = {}
    if not isinstance(stages_cfg, dict):
        raise _invalid("Seção `stages` deve ser um mapa", received=type(stages_cfg).__name__)
    unknown = [s for s in stages_cfg if s not in _STAGE_VALUES]
    if unknown:
        raise _invalid("Estágio desconhecido em `stages`", unknown=unknown, allowed=_STAGE_VALUES)

    for name, section in stages_cfg.items():
        if section is None:
            continue
        if not isinstance(section, dict):
            raise _invalid(
                "`stages.<kind>` deve ser um mapa",
                stage=name,
                received=type(section).__name__,
            )
        enabled = section.get("enabled", True)
        if not isinstance(enabled, bool):
            raise _invalid(
                "`stages.<kind>.enabled` deve ser booleano",
                stage=name,
                received=type(enabled).__name__,
            )

    return config


def load_config(
    *,
    defaults_path: str,
    local_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Carrega e resolve a configuração efetiva.

    Args:
        defaults_path (str): Caminho do arquivo de defaults.
        local_path (Optional[str]): Caminho opcional de overrides locais.

    Returns:
        Dict[str, Any]: Configuração final (defaults + local).

    Raises:
        DefaultsNotFoundError: Se o arquivo de defaults não existir.
        UnsupportedConfigFormatError: Se o formato não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo não for um dicionário.
        ConfigTypeConflictError: Se houver conflito de tipos no merge.
        EngineConfigurationError: Se `engine`/`stages` forem inválidos.
    """
    defaults = _load_file(Path(defaults_path))

    effective = defaults
    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(defaults, _load_file(local_file))

    return validate_engine_config(effective)
