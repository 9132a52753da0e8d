"""Namespace registries: loaded namespaces, forced loading and ancestor chains."""

from .namespace_interface import MarkerDescriptor, NamespaceHandle, NamespaceLoader, expand
from .memory_loader import InMemoryNamespaceLoader, MemoryNamespace
from .module_loader import ModuleNamespace, ModuleNamespaceLoader

__all__ = [
    "InMemoryNamespaceLoader",
    "MarkerDescriptor",
    "MemoryNamespace",
    "ModuleNamespace",
    "ModuleNamespaceLoader",
    "NamespaceHandle",
    "NamespaceLoader",
    "expand",
]
