"""Infrastructure layer — cross-cutting services for the chord dice platform.

Modules:
    metrics     Prometheus metrics registry.
"""
