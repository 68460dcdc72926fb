"""Base layer shared by all adapters.

Canonical protocol types, error taxonomy, provider interface, streaming
primitives, and the ambient infrastructure (logging, timeouts, pooled HTTP
clients, cancellation) live here. Adapters depend on this package; it never
depends on an adapter.
"""
