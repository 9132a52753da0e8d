"""Lookup of namespace markers, inherited from the closest marked parent namespace."""

from .markers import ClassMarkerDescriptor, ConfigurationError, MarkerSpec, Target, marker
from .models import ResolverSettings, coerce_settings
from .cache import CacheEntry, CacheState
from .resolver import AnnotationResolver, new_resolver

__all__ = [
    "AnnotationResolver",
    "CacheEntry",
    "CacheState",
    "ClassMarkerDescriptor",
    "ConfigurationError",
    "MarkerSpec",
    "ResolverSettings",
    "Target",
    "coerce_settings",
    "marker",
    "new_resolver",
]
