"""Reconcilers for gRPC load-generation resources over an in-memory object store."""

__version__ = "0.1.0"

__all__ = ["api", "burnerjob", "client", "grpcburner", "metrics", "observability", "resources"]