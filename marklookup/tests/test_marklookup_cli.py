import json

import pytest
from typer.testing import CliRunner

from marklookup.cli import app
from marklookup.tests.fixtures.loaders import GIVEN

runner = CliRunner()

AUDIENCE = "marklookup.tests.fixtures.given.markers:Audience"
NESTED2 = f"{GIVEN}.nested1.nested2"
NESTED4 = f"{NESTED2}.nested3.nested4"


@pytest.fixture
def logargs(tmp_path):
    return ["--logfile", str(tmp_path / "marklookup.log")]


def test_help():
    """Test the help command displays usage information."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Usage" in result.output


def test_expand(logargs):
    result = runner.invoke(app, logargs + ["expand", "a.b.c"])
    print(result.output)
    assert result.exit_code == 0
    assert result.output.split() == ["a.b.c", "a.b", "a"]


def test_resolve_inherited_and_unmarked(logargs, tmp_path):
    result = runner.invoke(app, logargs + ["resolve", AUDIENCE, NESTED4, f"{GIVEN}.nested1"])
    print(result.output)
    assert result.exit_code == 0
    assert f"{NESTED4} -> Audience(anchor='{NESTED2}')" in result.output
    assert f"{GIVEN}.nested1 -> no marker" in result.output
    # print_and_log also writes to the log file
    assert "no marker" in (tmp_path / "marklookup.log").read_text()


def test_resolve_with_stats(logargs):
    result = runner.invoke(app, logargs + ["resolve", AUDIENCE, NESTED4, "--stats"])
    assert result.exit_code == 0
    stats = json.loads(result.output.strip().splitlines()[-1])
    assert stats["misses"] == 1
    assert stats["loader"] == "ModuleNamespaceLoader"
    assert stats["cached"] >= 5


def test_resolve_with_config_file(logargs, tmp_path):
    config = tmp_path / "resolver.yaml"
    config.write_text("probe_past_first_hit: false\n")
    result = runner.invoke(app, logargs + ["resolve", AUDIENCE, NESTED4, "--stats", "--config", str(config)])
    assert result.exit_code == 0
    stats = json.loads(result.output.strip().splitlines()[-1])
    # nested4, nested3, nested2: the walk stops at the marked parent
    assert stats["cached"] == 3


@pytest.mark.parametrize("marker_ref", [
    "marklookup.tests.fixtures.given.markers:Tag",        # repeatable
    "marklookup.tests.fixtures.given.markers:ClassOnly",  # not for namespaces
    "marklookup.tests.fixtures.given.markers:Missing",
    "no_such_module_xyz:Marker",
    "no-colon",
])
def test_resolve_rejects_bad_marker_types(logargs, marker_ref):
    result = runner.invoke(app, logargs + ["resolve", marker_ref, "a.b"])
    print(result.output)
    assert result.exit_code == 1


def test_chain_table(logargs):
    result = runner.invoke(app, logargs + ["chain", AUDIENCE, NESTED4], env={"COLUMNS": "250"})
    print(result.output)
    assert result.exit_code == 0
    assert "inherited" in result.output
    assert "direct" in result.output
    assert "no marker" in result.output


def test_chain_same_marker_object_on_two_levels_is_direct_twice(logargs):
    result = runner.invoke(app, logargs + ["chain", AUDIENCE, f"{GIVEN}.twice.inner"], env={"COLUMNS": "250"})
    assert result.exit_code == 0
    assert "inherited" not in result.output
    assert result.output.count("direct") == 2
