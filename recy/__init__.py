"""
Recy Network API.

Application package root. This is a modular monolith using
hexagonal architecture (ports & adapters) with domain-driven design.

Bounded contexts:
    - audit: Audits of recycling reports and NFT minting triggers.

Layers:
    - domain: Pure business logic, entities, ports (ABCs), errors.
    - application: Use cases, DTOs, workflow orchestration.
    - infrastructure: Adapters (DB, minting service) implementing domain ports.
    - interfaces: FastAPI routers, Pydantic schemas.
    - shared: Cross-cutting concerns (errors, identifiers, security, logging).
"""
