from typing import Any, Iterable, Optional, Protocol, runtime_checkable


# Dot-separated namespace name, e.g. "billing.invoices.export"
NamespaceName = str

SEPARATOR = "."


def expand(name: NamespaceName) -> list[NamespaceName]:
    """
    Expand a namespace name into its ancestor chain, closest first.

    Example:
        expand("a.b.c")  # ["a.b.c", "a.b", "a"]
        expand("a")      # ["a"]
        expand("")       # []

    This only operates on the string. The result is not guaranteed
    to match an existing hierarchy of namespaces.
    """
    if not name:
        return []
    expanded = [name]
    end = name.rfind(SEPARATOR)
    while end > 0:
        expanded.append(name[:end])
        end = name.rfind(SEPARATOR, 0, end)
    return expanded


def is_within(name: NamespaceName, ancestor: NamespaceName) -> bool:
    """True if `ancestor` is `name` itself or one of its parents."""
    return name == ancestor or name.startswith(ancestor + SEPARATOR)


def declared_markers(holder: Any, attribute: str) -> tuple[Any, ...]:
    """
    Markers declared on `holder` (a module or any object) via `attribute`.
    The attribute may hold a single marker or a list/tuple of them.
    """
    declared = getattr(holder, attribute, None)
    if declared is None:
        return ()
    if isinstance(declared, (list, tuple, set, frozenset)):
        return tuple(declared)
    return (declared,)


def first_marker(markers: Iterable[Any], marker_type: type) -> Optional[Any]:
    """Return the first marker that is an instance of `marker_type`, or None."""
    for candidate in markers:
        if isinstance(candidate, marker_type):
            return candidate
    return None


@runtime_checkable
class NamespaceHandle(Protocol):
    """
    Interface Protocol for a loaded namespace.
    Exposes its own name and the markers applied directly to it.
    """
    @property
    def name(self) -> NamespaceName: ...

    def get_marker(self, marker_type: type) -> Optional[Any]:
        """
        Return the marker of `marker_type` applied directly to this namespace, or None.
        Markers of parent namespaces are NOT considered.
        """
        ...


class NamespaceLoader(Protocol):
    """
    Protocol for the registry of namespaces known to the running process.

    Implementations give access to the namespaces loaded so far and can
    try to force the loading of a namespace by name.
    """

    def list_loaded(self) -> Iterable[NamespaceHandle]:
        """
        Namespaces already loaded at the time of the call, unique by name.
        The result may grow between calls as unrelated code loads more namespaces.
        """
        ...

    def force_load(self, name: NamespaceName) -> Optional[NamespaceHandle]:
        """
        Try to load the namespace with the given name.

        Returns None if the namespace does not exist, exists but carries
        no metadata at all, or could not be loaded. Callers cannot tell
        these cases apart: all of them mean "no marker applied directly".
        """
        ...


class MarkerDescriptor(Protocol):
    """
    Facts about a marker type, independent of any namespace.
    """
    def is_repeatable(self, marker_type: type) -> bool: ...
    def is_namespace_applicable(self, marker_type: type) -> bool: ...
