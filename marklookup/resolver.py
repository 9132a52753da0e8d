"""
resolver.py
-----------
Finds the marker applied to a namespace, or inherited from its closest
marked parent, while namespaces keep appearing at runtime.

Searching happens on demand. The first query for a namespace walks its
parents, force-loading the ones not loaded yet. Every namespace visited
along the way is cached, so later queries for any of them need no search.

The walk does not stop at the closest marked parent: it continues up to
the root, or to the first namespace that is already cached. Checking a few
more handles is cheap, while repeated force-loading of the same parents by
later queries is not. Set ``probe_past_first_hit=False`` to stop early.

Example, for ``p1.p2.p3.p4.p5`` where ``p1`` and ``p4`` carry M1 and M4:

    p1 -> M1, p2 -> M1, p3 -> M1, p4 -> M4, p5 -> M4
"""

from __future__ import annotations

import contextlib
import logging
import threading
from typing import Any, Generic, Optional, TypeVar

from box import Box

from marklookup.cache import CacheEntry, CacheState, ResolutionCache
from marklookup.markers import ClassMarkerDescriptor, ConfigurationError
from marklookup.models import ResolverSettings, coerce_settings
from namespaces.module_loader import ModuleNamespaceLoader
from namespaces.namespace_interface import (
    MarkerDescriptor,
    NamespaceHandle,
    NamespaceLoader,
    NamespaceName,
    expand,
    is_within,
)

logger = logging.getLogger(__name__)

M = TypeVar("M")


class AnnotationResolver(Generic[M]):
    """
    Resolves markers of one type for namespaces and their parents.

    Args:
        marker_type: The class of markers to look for. It must NOT be repeatable,
            and it must be applicable to namespaces.
        loader: Registry of namespaces. Defaults to Python modules (``sys.modules``).
        descriptor: Source of facts about ``marker_type``. Defaults to ``@marker`` declarations.
        settings: ResolverSettings, or anything ``coerce_settings`` accepts.

    Raises:
        ConfigurationError: if ``marker_type`` cannot be looked up on namespaces.
    """

    def __init__(
        self,
        marker_type: type[M],
        loader: Optional[NamespaceLoader] = None,
        descriptor: Optional[MarkerDescriptor] = None,
        settings: ResolverSettings | Any = None,
    ) -> None:
        self.settings = coerce_settings(settings)
        self.descriptor = descriptor if descriptor is not None else ClassMarkerDescriptor()
        check_marker_type(marker_type, self.descriptor)
        self.marker_type = marker_type
        self.loader = loader if loader is not None else ModuleNamespaceLoader(self.settings.marker_attribute)
        self._cache = ResolutionCache()
        self._lock = threading.RLock() if self.settings.thread_safe else contextlib.nullcontext()
        self._hits = 0
        self._misses = 0
        logger.info(f"Resolver for {marker_type.__qualname__} created with {type(self.loader).__name__}")

    def resolve(self, name: NamespaceName) -> Optional[M]:
        """
        Return the marker applied to the namespace ``name``, or to its closest marked parent.

        1. ``name`` itself is marked: its own marker is returned.
        2. ``name`` is not marked, but a parent is: the closest parent's marker is returned.
        3. Neither ``name`` nor any parent is marked: None.

        Never raises for missing or broken namespaces; they count as not marked.
        Module code may call it again while being force-loaded: entries cached
        by that inner call are kept, and the outer call returns them.
        """
        if not name:
            return None
        with self._lock:
            entry = self._cache.get(name)
            if entry.known:
                self._hits += 1
                return entry.value
            self._misses += 1
            self._cache.add_all(self._search_hierarchy(name))
            return self._cache.get(name).value

    def resolve_for(self, namespace: NamespaceHandle) -> Optional[M]:
        """
        Same as ``resolve(namespace.name)``, but a directly marked handle
        is answered without consulting the loader.
        """
        name = namespace.name
        with self._lock:
            if name and name not in self._cache:
                direct = namespace.get_marker(self.marker_type)
                if direct is not None:
                    self._misses += 1
                    self._cache.add_all([(name, CacheEntry.of(direct))])
        return self.resolve(name)

    def is_known(self, name: NamespaceName) -> bool:
        """True if ``name`` is cached, i.e. resolving it needs no search."""
        return name in self._cache

    @property
    def info(self) -> Box:
        """Snapshot of the resolver configuration and its cache."""
        return Box({
            "marker_type": f"{self.marker_type.__module__}.{self.marker_type.__qualname__}",
            "loader": type(self.loader).__name__,
            "cached": len(self._cache),
            "present": self._cache.count(CacheState.PRESENT),
            "absent": self._cache.count(CacheState.ABSENT),
            "hits": self._hits,
            "misses": self._misses,
        })

    # -- search ----------------------------------------------------------------

    def _search_hierarchy(self, name: NamespaceName) -> list[tuple[NamespaceName, CacheEntry]]:
        """Walk from ``name`` to the root and return propagated entries for every visited level."""
        logger.debug(f"Cache miss for {name!r}, searching its hierarchy")
        possible = expand(name)
        loaded = self._loaded_hierarchy(name)
        found = self._find_markers(possible, loaded)
        propagated = propagate(found)
        logger.debug(f"Caching {len(propagated)} namespace(s) for {name!r}: {[n for n, _ in propagated]}")
        return propagated

    def _loaded_hierarchy(self, name: NamespaceName) -> dict[NamespaceName, NamespaceHandle]:
        """Already loaded handles for ``name`` and its parents."""
        return {
            handle.name: handle
            for handle in self.loader.list_loaded()
            if is_within(name, handle.name)
        }

    def _find_markers(
        self,
        possible: list[NamespaceName],
        loaded: dict[NamespaceName, NamespaceHandle],
    ) -> list[tuple[NamespaceName, Optional[M]]]:
        """
        Pair every namespace of ``possible`` with its directly applied marker, or None.

        A namespace that is not loaded is force-loaded first. A failed loading
        means the namespace does not exist or carries no metadata; either way
        it counts as not marked.

        The walk stops at the first namespace that is already cached: all
        further parents are cached too. Its resolved value is included, so
        it can be propagated to the nested namespaces.
        """
        found: list[tuple[NamespaceName, Optional[M]]] = []
        for level in possible:
            cached = self._cache.get(level)
            if cached.known:
                found.append((level, cached.value))
                break
            handle = loaded.get(level)
            if handle is None:
                logger.debug(f"Force-loading namespace {level!r}")
                handle = self.loader.force_load(level)
            direct = handle.get_marker(self.marker_type) if handle is not None else None
            found.append((level, direct))
            if direct is not None and not self.settings.probe_past_first_hit:
                break
        return found

    def __repr__(self) -> str:
        return f"AnnotationResolver({self.marker_type.__qualname__}, cached={len(self._cache)})"


def propagate(found: list[tuple[NamespaceName, Any]]) -> list[tuple[NamespaceName, CacheEntry]]:
    """
    Give every unmarked namespace the marker of its closest marked parent.

    ``found`` goes from the nested namespace to the root, as ``expand`` returns it.
    The result keeps that order.
    """
    last_found = None
    propagated = []
    for name, marker in reversed(found):
        if marker is not None:
            last_found = marker
        propagated.append((name, CacheEntry.of(last_found)))
    propagated.reverse()
    return propagated


def check_marker_type(marker_type: Any, descriptor: MarkerDescriptor) -> None:
    """Raise ConfigurationError unless ``marker_type`` can be looked up on namespaces."""
    if not isinstance(marker_type, type):
        raise ConfigurationError(f"Marker type must be a class, got {marker_type!r}.")
    name = marker_type.__qualname__
    if descriptor.is_repeatable(marker_type):
        raise ConfigurationError(
            f"The given `{name}` marker is repeatable. "
            "Lookup for repeatable markers is not supported."
        )
    if not descriptor.is_namespace_applicable(marker_type):
        raise ConfigurationError(
            f"The given `{name}` marker is not applicable to namespaces. "
            "Please declare it with `@marker(targets={Target.NAMESPACE, ...})`."
        )


def new_resolver(
    marker_type: type[M],
    loader: Optional[NamespaceLoader] = None,
    descriptor: Optional[MarkerDescriptor] = None,
    settings: ResolverSettings | Any = None,
) -> AnnotationResolver[M]:
    """Create a resolver for ``marker_type``. See AnnotationResolver."""
    return AnnotationResolver(marker_type, loader=loader, descriptor=descriptor, settings=settings)
