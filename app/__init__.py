"""
Stock Trade API — account, address and trade management.

Application package root. A modular monolith using hexagonal
architecture (ports & adapters).

Bounded contexts:
    - brokerage: accounts, their single address, and trade lifecycle.

Layers:
    - domain: Entities, ports (ABCs), errors.
    - application: Managers orchestrating domain rules over ports.
    - infrastructure: Storage adapters (PostgreSQL, in-memory).
    - interfaces: FastAPI routers, Pydantic schemas.
    - shared: Cross-cutting concerns (errors, security, logging).
"""
