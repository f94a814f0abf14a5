"""
WagerBridge: betting core and Fantasy402 integration service.

Application package root. This is a modular monolith using
hexagonal architecture (ports & adapters) with domain-driven design.

Bounded contexts:
    - betting: Odds value objects, the Bet aggregate and its settlement lifecycle.
    - fantasy402: Anti-corruption layer over the external Fantasy402 wagering API.

Layers:
    - domain: Pure business logic, entities, value objects, ports (ABCs), errors.
    - application: Use cases, DTOs, orchestration.
    - infrastructure: Adapters (HTTP, DB, event bus) implementing domain ports.
    - interfaces: FastAPI routers, Pydantic schemas.
    - shared: Cross-cutting concerns (errors, retry, security, logging).
"""
