"""Marker declaration: the `@marker` decorator and the default descriptor."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Optional, TypeVar

MARKER_SPEC = "__marker_spec__"
"""Attribute name stamped onto marker classes by ``@marker``."""

T = TypeVar("T", bound=type)


class ConfigurationError(ValueError):
    """Raised when a resolver is constructed with an unusable marker type."""


class Target(str, Enum):
    """Kinds of program elements a marker may be applied to."""

    NAMESPACE = "namespace"
    CLASS = "class"
    FUNCTION = "function"


@dataclass(frozen=True)
class MarkerSpec:
    """Declaration-time facts about a marker class."""

    repeatable: bool = False
    targets: frozenset[Target] = field(default_factory=lambda: frozenset(Target))


def marker(*, repeatable: bool = False, targets: Optional[Iterable[Target]] = None) -> Callable[[T], T]:
    """
    Declare a class as a marker type.

    Example:
        @marker(targets={Target.NAMESPACE})
        @dataclass(frozen=True)
        class Owner:
            team: str

    A class without this decorator is treated as a non-repeatable marker
    applicable everywhere.
    """
    spec = MarkerSpec(
        repeatable=repeatable,
        targets=frozenset(Target) if targets is None else frozenset(Target(t) for t in targets),
    )

    def decorate(cls: T) -> T:
        setattr(cls, MARKER_SPEC, spec)
        return cls

    return decorate


def spec_of(marker_type: type) -> MarkerSpec:
    # own namespace only: subclasses do not inherit the declaration
    spec = vars(marker_type).get(MARKER_SPEC)
    return spec if isinstance(spec, MarkerSpec) else MarkerSpec()


class ClassMarkerDescriptor:
    """Reads the facts stamped by ``@marker`` on the marker class."""

    def is_repeatable(self, marker_type: type) -> bool:
        return spec_of(marker_type).repeatable

    def is_namespace_applicable(self, marker_type: type) -> bool:
        return Target.NAMESPACE in spec_of(marker_type).targets


__all__ = [
    "ClassMarkerDescriptor",
    "ConfigurationError",
    "MarkerSpec",
    "Target",
    "marker",
    "spec_of",
]
