"""
Neighborhood Market: location-aware secondhand marketplace.

Application package root. This is a modular monolith using
hexagonal architecture (ports & adapters) with domain-driven design.

Bounded contexts:
    - market: Members, trade posts and their lifecycle, nearby discovery,
      likes, rankings, and the neighbor feed.

Layers:
    - domain: Pure business logic, entities, ports (ABCs), errors.
    - application: Use cases, DTOs, orchestration.
    - infrastructure: Adapters (SQL repositories, unit of work, hashing).
    - interfaces: FastAPI routers, Pydantic schemas.
    - shared: Cross-cutting concerns (errors, security, logging).
"""
