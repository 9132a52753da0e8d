"""
Test namespaces:

    given
    ├── nested1
    │   └── nested2          [Audience, Stability]
    │       └── nested3
    │           └── nested4
    ├── unloaded             (same shape, purged from sys.modules by tests)
    ├── single               [Audience] declared without a list
    ├── twice                [Audience], the same object again on `inner`
    ├── reentrant            [Audience], resolved by its own submodule during import
    ├── broken               raises on import
    └── exits                calls sys.exit() on import
"""
