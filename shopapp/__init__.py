"""
Shop API: online-shop back end.

Application package root. This is a modular monolith using
hexagonal architecture (ports & adapters).

Bounded contexts:
    - shop: Catalog, orders and stock, watchlist, sales reports, identity.

Layers:
    - domain: Pure business logic, entities, ports (ABCs), errors.
    - application: Use cases, DTOs, orchestration.
    - infrastructure: Adapters (SQL store, hashing, tokens) implementing domain ports.
    - interfaces: FastAPI routers, Pydantic schemas, principal resolution.
    - shared: Cross-cutting concerns (errors, security, logging).
"""
