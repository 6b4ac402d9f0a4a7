"""Schema definition resolver for Kubernetes custom resources."""

__version__ = "0.1.0"
