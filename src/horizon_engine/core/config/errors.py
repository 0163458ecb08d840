# src/horizon_engine/core/config/errors.py
"""
Exceções da camada de configuração do Horizon Engine.

Todas herdam de `ConfigError`, permitindo captura genérica de falhas de
carregamento e merge sem confundi-las com falhas de execução do grafo.
"""


class ConfigError(Exception):
    """Base dos erros de configuração."""


class DefaultsNotFoundError(ConfigError):
    """O arquivo de defaults (obrigatório) não existe."""


class UnsupportedConfigFormatError(ConfigError):
    """
    Extensão de arquivo não suportada.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """O conteúdo raiz do arquivo não é um mapa chave-valor."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo:
        - base:     {"engine": {"dispose_on_exit": false}}
        - override: {"engine": "off"}
    """
