"""
Infrastructure Package
======================

Provides abstraction layers for external dependencies following the Dependency Inversion Principle.

Modules:
    - storage: Object storage abstraction (S3) and the product image store
    - observability: OpenTelemetry tracing setup
    - container: Lazily-built service instances

This package enables:
    - Easy testing with mock implementations
    - Switching between providers without code changes
    - Loose coupling between business logic and infrastructure
"""
