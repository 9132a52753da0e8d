import importlib
import logging
import sys
from types import ModuleType
from typing import Any, Optional

from namespaces.namespace_interface import (
    NamespaceHandle,
    NamespaceLoader,
    NamespaceName,
    declared_markers,
    first_marker,
)

logger = logging.getLogger(__name__)

DEFAULT_MARKER_ATTRIBUTE = "__markers__"


class ModuleNamespace(NamespaceHandle):
    """ A namespace backed by an imported Python module.

    Markers are read from a module-level attribute, e.g. in ``billing/__init__.py``:

        __markers__ = [Owner(team="payments"), Stability("beta")]

    Args:
        module (ModuleType): The imported module.
        marker_attribute (str): Name of the module attribute holding its markers.
    """

    def __init__(self, module: ModuleType, marker_attribute: str = DEFAULT_MARKER_ATTRIBUTE):
        self.module = module
        self.marker_attribute = marker_attribute

    @property
    def name(self) -> NamespaceName:
        return self.module.__name__

    @property
    def has_markers(self) -> bool:
        return bool(declared_markers(self.module, self.marker_attribute))

    def get_marker(self, marker_type: type) -> Optional[Any]:
        return first_marker(declared_markers(self.module, self.marker_attribute), marker_type)

    def __repr__(self) -> str:
        return f"ModuleNamespace({self.name!r})"


class ModuleNamespaceLoader(NamespaceLoader):
    """ The default loader: ``sys.modules`` is the registry of loaded namespaces,
    and importing a module forces the loading of its namespace.

    Importing runs module code. A module that raises while being imported
    is logged and treated as carrying no markers.
    """

    def __init__(self, marker_attribute: str = DEFAULT_MARKER_ATTRIBUTE):
        self.marker_attribute = marker_attribute

    def list_loaded(self) -> list[ModuleNamespace]:
        # Snapshot: imports triggered by other threads may mutate sys.modules.
        modules = list(sys.modules.items())
        return [
            ModuleNamespace(module, self.marker_attribute)
            for key, module in modules
            if isinstance(module, ModuleType) and getattr(module, "__name__", None) == key
        ]

    def force_load(self, name: NamespaceName) -> Optional[ModuleNamespace]:
        try:
            module = importlib.import_module(name)
        except ImportError as e:
            logger.debug(f"Namespace {name!r} cannot be imported: {e}")
            return None
        except (Exception, SystemExit) as e:
            logger.warning(f"Importing namespace {name!r} failed: {type(e).__name__}: {e}")
            return None
        handle = ModuleNamespace(module, self.marker_attribute)
        if not handle.has_markers:
            logger.debug(f"Namespace {name!r} has no {self.marker_attribute!r} attribute")
            return None
        return handle

    def is_loaded(self, name: NamespaceName) -> bool:
        """Tell whether a module with the given name is already imported. Imports nothing."""
        return name in sys.modules
