from .policy import AccessPolicy, Allowed, Denied, Operation, ResourceKind

__all__ = ["AccessPolicy", "Allowed", "Denied", "Operation", "ResourceKind"]
