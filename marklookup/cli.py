"""
This file is the entry point for the 'marklookup' command-line tool.
Run 'marklookup --help' in your shell to see the commands.

Marker types are given as 'package.module:ClassName'.
"""
import importlib
import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from common.app_setup import print_and_log, print_error, setup_logging
from marklookup.markers import ConfigurationError
from marklookup.models import coerce_settings
from marklookup.resolver import AnnotationResolver, new_resolver
from namespaces.namespace_interface import expand as expand_name

app = typer.Typer(add_completion=False, help="Look up namespace markers inherited from parent packages.")


@app.callback()
def main(
    logfile: Optional[Path] = typer.Option(None, help="Log file (default: ~/.marklookup/log.txt)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug messages"),
):
    setup_logging(
        app_name="marklookup",
        loglevel=logging.DEBUG if verbose else logging.INFO,
        logfile=str(logfile) if logfile else None,
    )


@app.command()
def resolve(
    marker_ref: str = typer.Argument(..., help="Marker type, as 'module:ClassName'"),
    names: list[str] = typer.Argument(..., help="Namespaces to resolve"),
    config: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="YAML/JSON resolver settings"),
    stats: bool = typer.Option(False, help="Print resolver statistics as JSON afterwards"),
):
    """Print the marker applied to each namespace, or inherited from its parents."""
    resolver = _build_resolver(marker_ref, config)
    for name in names:
        found = resolver.resolve(name)
        print_and_log(f"{name} -> {found!r}" if found is not None else f"{name} -> no marker")
    if stats:
        print_and_log(json.dumps(resolver.info.to_dict()))


@app.command()
def expand(name: str = typer.Argument(..., help="Namespace name")):
    """Print a namespace and its parents, closest first."""
    for level in expand_name(name):
        print_and_log(level)


@app.command()
def chain(
    marker_ref: str = typer.Argument(..., help="Marker type, as 'module:ClassName'"),
    name: str = typer.Argument(..., help="Namespace name"),
    config: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="YAML/JSON resolver settings"),
):
    """Show how the marker of a namespace is resolved along its parents."""
    resolver = _build_resolver(marker_ref, config)
    levels = expand_name(name)
    resolved = [resolver.resolve(level) for level in levels]
    loaded = {handle.name: handle for handle in resolver.loader.list_loaded()}
    table = Table(title=f"{name} ({marker_ref})")
    table.add_column("namespace")
    table.add_column("marker")
    table.add_column("origin")
    for level, found in zip(levels, resolved):
        if found is None:
            origin = "-"
        elif _direct_marker(resolver, level, loaded) is not None:
            origin = "direct"
        else:
            origin = "inherited"
        table.add_row(level, repr(found) if found is not None else "no marker", origin)
    Console().print(table)
    logging.getLogger(__name__).info(f"chain {name}: {[repr(r) for r in resolved]}")


def _direct_marker(resolver: AnnotationResolver, level: str, loaded: dict):
    handle = loaded.get(level)
    if handle is None:
        handle = resolver.loader.force_load(level)
    return handle.get_marker(resolver.marker_type) if handle is not None else None


def _build_resolver(marker_ref: str, config: Optional[Path]) -> AnnotationResolver:
    try:
        marker_type = _import_marker_type(marker_ref)
        return new_resolver(marker_type, settings=coerce_settings(config))
    except (ConfigurationError, ValueError, ImportError, AttributeError) as e:
        print_error(f"Cannot create resolver for {marker_ref}: {e}")
        raise typer.Exit(1)


def _import_marker_type(marker_ref: str) -> type:
    """Import 'package.module:Outer.Inner' and return the attribute."""
    module_name, sep, qualname = marker_ref.partition(":")
    if not sep or not module_name or not qualname:
        raise ValueError(f"expected 'module:ClassName', got {marker_ref!r}")
    target = importlib.import_module(module_name)
    for part in qualname.split("."):
        target = getattr(target, part)
    return target


if __name__ == "__main__":
    app()
