"""
Tests for the command line front end.
"""

import json

import pytest

from pddl_planner.cli import main
from pddl_planner.planners.errors import PlanParseError

from .conftest import DOMAIN, PROBLEM, StubPlugin, make_plan


@pytest.fixture
def files(tmp_path):
    domain = tmp_path / "domain.pddl"
    problem = tmp_path / "problem.pddl"
    domain.write_text(DOMAIN)
    problem.write_text(PROBLEM)
    return str(domain), str(problem)


@pytest.fixture
def stubs():
    return {
        "lama": StubPlugin("lama", [make_plan("pick-up b", "stack b a", cost=2)]),
        "fd": StubPlugin("fd", error=PlanParseError("sas_plan:1: cannot parse plan line 'x'")),
        "bfsf": StubPlugin("bfsf", [make_plan("pick-up b", "stack b a")]),
    }


def test_single_planner(files, stubs, make_registry, capsys):
    code = main(["-p", "lama", "-t", "2.5", *files], registry=make_registry(*stubs.values()))
    out = capsys.readouterr().out

    assert code == 0
    assert out.startswith("Planner lama:\n")
    assert "(pick-up b)\n(stack b a)\n; cost = 2" in out
    assert stubs["lama"].calls[0][3] == 2.5


def test_default_planner_is_used_without_selection(files, stubs, make_registry, capsys, monkeypatch):
    from pddl_planner.core.config import settings

    monkeypatch.setattr(settings, "DEFAULT_PLANNER", "bfsf")
    assert main(list(files), registry=make_registry(*stubs.values())) == 0
    assert len(stubs["bfsf"].calls) == 1


def test_planner_list_with_partial_failure_still_exits_zero(files, stubs, make_registry, capsys):
    code = main(["-l", "fd,lama", "-l", "bfsf", "-s", *files], registry=make_registry(*stubs.values()))
    out = capsys.readouterr().out

    assert code == 0
    assert out.index("Planner fd:") < out.index("Planner lama:") < out.index("Planner bfsf:")
    assert "FAILED (parse_failure)" in out


def test_json_output(files, stubs, make_registry, capsys):
    code = main(["-l", "lama,fd", "--json", *files], registry=make_registry(*stubs.values()))
    data = json.loads(capsys.readouterr().out)

    assert code == 0
    assert data["planners"] == ["lama", "fd"]
    assert data["failed"] == ["fd"]


def test_unknown_planner_lists_registered_planners(files, stubs, make_registry, capsys):
    code = main(["-p", "ff", *files], registry=make_registry(*stubs.values()))
    err = capsys.readouterr().err

    assert code == 1
    assert "planner with name 'ff'" in err
    assert "bfsf fd lama" in err
    assert all(stub.calls == [] for stub in stubs.values())


def test_unreadable_input_file(tmp_path, stubs, make_registry, capsys):
    missing = str(tmp_path / "missing.pddl")
    code = main(["-p", "lama", missing, missing], registry=make_registry(*stubs.values()))
    assert code == 1
    assert "Error opening file" in capsys.readouterr().err


def test_list_planners(stubs, make_registry, capsys):
    assert main(["--list"], registry=make_registry(*stubs.values())) == 0
    out = capsys.readouterr().out
    assert "REGISTERED PLANNERS" in out
    assert "lama" in out and "bfsf" in out


@pytest.mark.parametrize("argv", [
    [],
    ["only-domain.pddl"],
    ["-p", "lama", "-l", "fd", "d", "p"],
])
def test_usage_errors_exit_with_status_two(argv, stubs, make_registry):
    with pytest.raises(SystemExit) as info:
        main(argv, registry=make_registry(*stubs.values()))
    assert info.value.code == 2


def test_non_positive_timeout_is_a_usage_error(files, stubs, make_registry):
    with pytest.raises(SystemExit) as info:
        main(["-t", "0", *files], registry=make_registry(*stubs.values()))
    assert info.value.code == 2


@pytest.mark.parametrize("timeout", ["inf", "nan"])
def test_unbounded_timeout_is_a_usage_error(timeout, files, stubs, make_registry):
    with pytest.raises(SystemExit) as info:
        main(["-t", timeout, *files], registry=make_registry(*stubs.values()))
    assert info.value.code == 2
    assert all(stub.calls == [] for stub in stubs.values())
