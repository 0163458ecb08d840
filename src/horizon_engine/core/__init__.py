# src/horizon_engine/core/__init__.py
"""
Core do Horizon Engine.

Implementação canônica do motor de grafos de estágios, independente de
UI, serviços de orquestração e armazenamento.

Princípios fundamentais:
    - Ordenação determinística para o mesmo grafo
    - Falhas estruturais são fatais e surgem antes de qualquer efeito
    - Falhas de nó são recuperadas e ficam visíveis no resultado
    - Grafos são imutáveis e reutilizáveis entre execuções
"""
