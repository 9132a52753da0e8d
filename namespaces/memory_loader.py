"""
memory_loader.py
----------------
A namespace registry kept in memory.

Useful for namespaces that are not Python modules (plugin names, config
sections, feature trees) and as a deterministic loader in tests.

Known namespaces start either loaded (`preloaded`) or unloaded. An unloaded
namespace becomes loaded on the first successful `force_load`, the same way
importing a module adds it to ``sys.modules``.
"""

import logging
from typing import Any, Iterable, Mapping, Optional

from namespaces.namespace_interface import NamespaceHandle, NamespaceLoader, NamespaceName, first_marker

logger = logging.getLogger(__name__)


class MemoryNamespace(NamespaceHandle):
    """A namespace with a fixed tuple of markers."""

    def __init__(self, name: NamespaceName, markers: Iterable[Any] = ()):
        self._name = name
        self.markers: tuple[Any, ...] = tuple(markers)

    @property
    def name(self) -> NamespaceName:
        return self._name

    def get_marker(self, marker_type: type) -> Optional[Any]:
        return first_marker(self.markers, marker_type)

    def __repr__(self) -> str:
        return f"MemoryNamespace({self._name!r}, markers={list(self.markers)!r})"


class InMemoryNamespaceLoader(NamespaceLoader):
    """ Namespace loader over a dict of name -> markers.

    Args:
        namespaces (Mapping[str, Iterable]): Known namespaces and the markers applied directly to them.
        preloaded (Iterable[str]): Names that are loaded from the start.
            Names not present in `namespaces` are added without markers.
    """

    def __init__(self, namespaces: Optional[Mapping[NamespaceName, Iterable[Any]]] = None,
                 preloaded: Iterable[NamespaceName] = ()):
        self._known: dict[NamespaceName, MemoryNamespace] = {}
        self._loaded: dict[NamespaceName, MemoryNamespace] = {}
        for name, markers in (namespaces or {}).items():
            self.register(name, *markers)
        for name in preloaded:
            if name not in self._known:
                self.register(name)
            self._loaded[name] = self._known[name]

    def register(self, name: NamespaceName, *markers: Any) -> MemoryNamespace:
        """Add (or replace) a known namespace. Its loaded state is unchanged."""
        namespace = MemoryNamespace(name, markers)
        self._known[name] = namespace
        if name in self._loaded:
            self._loaded[name] = namespace
        return namespace

    def list_loaded(self) -> list[MemoryNamespace]:
        return list(self._loaded.values())

    def force_load(self, name: NamespaceName) -> Optional[MemoryNamespace]:
        namespace = self._known.get(name)
        if namespace is None or not namespace.markers:
            # nonexistent and metadata-free namespaces look the same to callers
            logger.debug(f"Namespace {name!r} not loadable")
            return None
        self._loaded[name] = namespace
        return namespace

    def is_loaded(self, name: NamespaceName) -> bool:
        return name in self._loaded
