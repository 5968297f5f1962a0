"""
Integration tests package.

Tests de integración sobre SQLite in-memory y la app FastAPI completa:
- Repositorios SQL (compare-and-swap, unicidad del libro contable)
- Transaction manager (commit / rollback)
- Health checks

Para ejecutar solo tests de integración:
    pytest -m integration
"""
