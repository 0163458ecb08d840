# src/horizon_engine/core/engine/__init__.py
"""
Engine do Horizon Engine.

Componentes:
    - degree  → graus de entrada/saída (funções puras)
    - planner → ordenação topológica determinística e validações estruturais
    - engine  → execução sequencial com fallback, filtro e cancelamento

Planejamento e execução são responsabilidades separadas: a ordem é
calculada por completo antes do primeiro nó executar.
"""
