"""
Resolver tests over real Python packages, using the default module loader.

The test packages live in `marklookup.tests.fixtures.given`:

    nested1
    └── nested2   [Audience(anchor=<nested2 module name>)]
        └── nested3
            └── nested4

`unloaded` repeats that shape. Tests purge it from sys.modules first,
so it is only ever loaded by the resolver itself.
"""
import importlib
import threading

import pytest

from marklookup.resolver import new_resolver
from marklookup.tests.fixtures import shared
from marklookup.tests.fixtures.given.markers import Audience
from marklookup.tests.fixtures.loaders import GIVEN, UNLOADED, MemoizingLoader, purge_modules
from namespaces.module_loader import ModuleNamespace, ModuleNamespaceLoader

NESTED1 = f"{GIVEN}.nested1"
NESTED2 = f"{NESTED1}.nested2"
NESTED3 = f"{NESTED2}.nested3"
NESTED4 = f"{NESTED3}.nested4"


@pytest.fixture
def loader():
    return MemoizingLoader(ModuleNamespaceLoader())


@pytest.fixture
def resolver(loader):
    return new_resolver(Audience, loader=loader)


class TestReturnsMarker:

    def test_directly_marked_module(self, resolver, loader):
        nested2 = importlib.import_module(NESTED2)
        found = resolver.resolve_for(ModuleNamespace(nested2))
        assert found == Audience(anchor=NESTED2)
        assert loader.list_calls == 0

    def test_inherited_from_loaded_parent(self, resolver, loader):
        importlib.import_module(NESTED4)
        found = resolver.resolve(NESTED4)
        assert found == Audience(anchor=NESTED2)
        assert loader.list_calls == 1
        # the whole hierarchy was already imported
        assert loader.total_force_loads == 0

    def test_inherited_from_unloaded_parent(self, resolver, loader):
        purge_modules(UNLOADED)
        nested2 = f"{UNLOADED}.nested1.nested2"
        nested4 = f"{nested2}.nested3.nested4"
        assert not loader.is_loaded(nested2)

        found = resolver.resolve(nested4)

        assert found == Audience(anchor=nested2)
        assert loader.is_loaded(nested2)
        assert loader.force_loads[nested4] == 1
        assert loader.force_loads[nested2] == 1


class TestCachesParents:

    def test_unmarked_ones(self, resolver, loader):
        found = [resolver.resolve(NESTED4), resolver.resolve(NESTED3), resolver.resolve(NESTED3)]
        assert found == [Audience(anchor=NESTED2)] * 3
        assert loader.list_calls == 1

    def test_marked_ones(self, resolver, loader):
        found = [resolver.resolve(NESTED4), resolver.resolve(NESTED2), resolver.resolve(NESTED2)]
        assert found == [Audience(anchor=NESTED2)] * 3
        assert loader.list_calls == 1

    def test_ones_beyond_the_closest_marked_parent(self, resolver, loader):
        assert resolver.resolve(NESTED4) == Audience(anchor=NESTED2)
        assert resolver.resolve(NESTED1) is None
        assert resolver.resolve("marklookup") is None
        assert loader.list_calls == 1


def test_none_if_no_module_in_hierarchy_is_marked(resolver):
    assert resolver.resolve(NESTED1) is None


def test_missing_modules_are_not_force_loaded_twice(resolver, loader):
    missing = f"{GIVEN}.ghost.deeper"
    assert resolver.resolve(missing) is None
    assert loader.force_loads[missing] == 1
    assert loader.force_loads[f"{GIVEN}.ghost"] == 1

    # a sibling stops at the cached `ghost` level
    assert resolver.resolve(f"{GIVEN}.ghost.other") is None
    assert loader.force_loads[f"{GIVEN}.ghost"] == 1


def test_broken_module_counts_as_unmarked(resolver):
    assert resolver.resolve(f"{GIVEN}.broken.inner") is None


def test_module_exiting_on_import_counts_as_unmarked(resolver):
    assert resolver.resolve(f"{GIVEN}.exits.inner") is None


class TestResolvedDuringImport:
    """`reentrant/helpers.py` resolves its package while the resolver is importing it."""

    PACKAGE = f"{GIVEN}.reentrant"

    @pytest.fixture(autouse=True)
    def fresh_package(self):
        purge_modules(self.PACKAGE)
        yield
        purge_modules(self.PACKAGE)

    def test_inner_result_is_kept(self, resolver, monkeypatch):
        monkeypatch.setattr(shared, "RESOLVER", resolver)
        found = resolver.resolve(self.PACKAGE)
        helpers = importlib.import_module(f"{self.PACKAGE}.helpers")
        # cached as unmarked by the inner call, before `__markers__` was assigned
        assert found is None
        assert helpers.OWN is None
        assert resolver.resolve(self.PACKAGE) is None

    def test_thread_safe_resolver_does_not_deadlock(self, loader, monkeypatch):
        resolver = new_resolver(Audience, loader=loader, settings={"thread_safe": True})
        monkeypatch.setattr(shared, "RESOLVER", resolver)
        results = []
        t = threading.Thread(target=lambda: results.append(resolver.resolve(self.PACKAGE)))
        t.start()
        t.join(timeout=5)
        assert not t.is_alive()
        assert len(results) == 1
        assert resolver.resolve(self.PACKAGE) == results[0]
