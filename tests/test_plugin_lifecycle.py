"""
Tests for the staging / invocation / timeout / cleanup protocol of
PlannerPlugin, using shell scripts in place of real planners.
"""

import asyncio
import os
import time

import psutil
import pytest

from pddl_planner.planners.errors import (
    AbnormalExitError,
    ErrorKind,
    PlanParseError,
    PlannerNotFoundError,
    PlannerTimeoutError,
    StagingError,
)

from .conftest import DOMAIN, PROBLEM, ScriptPlugin

pytestmark = pytest.mark.skipif(os.name == "nt", reason="planner stand-ins are POSIX shell scripts")


def _staging_dirs(root):
    return [p for p in root.iterdir() if p.is_dir()] if root.exists() else []


def _assert_staging_empty(root):
    dirs = _staging_dirs(root)
    assert dirs, "expected a staging directory to have been created"
    for d in dirs:
        assert list(d.iterdir()) == []


def test_multiple_numbered_candidates_are_parsed(write_script, staging_root):
    script = write_script("anytime.sh", """\
        printf '(unstack a b)\\n(put-down a)\\n(pick-up b)\\n(stack b a)\\n; cost = 4\\n' > "$3.1"
        printf '(pick-up b)\\n(stack b a)\\n; cost = 2\\n' > "$3.2"
        echo translated > output.sas
    """)
    plugin = ScriptPlugin(script, staging_root)

    candidates = asyncio.run(plugin.plan(PROBLEM, "", DOMAIN, timeout=10))

    assert len(candidates) == 2
    first, second = candidates.plans
    assert [str(a) for a in first] == ["(unstack a b)", "(put-down a)", "(pick-up b)", "(stack b a)"]
    assert [str(a) for a in second] == ["(pick-up b)", "(stack b a)"]
    assert candidates.best() is second
    _assert_staging_empty(staging_root)


def test_single_result_file(write_script, staging_root):
    script = write_script("single.sh", """\
        printf '(pick-up b)\\n(stack b a)\\n' > "$3"
    """)
    candidates = asyncio.run(ScriptPlugin(script, staging_root).plan(PROBLEM, "", DOMAIN, timeout=10))
    assert len(candidates) == 1
    assert candidates.plans[0].source == "plan"


def test_no_plan_files_is_an_empty_success(write_script, staging_root):
    script = write_script("nothing.sh", "exit 0\n")
    candidates = asyncio.run(ScriptPlugin(script, staging_root).plan(PROBLEM, "", DOMAIN, timeout=10))
    assert len(candidates) == 0
    _assert_staging_empty(staging_root)


def test_inputs_are_written_with_action_extensions(write_script, staging_root, tmp_path):
    seen = tmp_path / "seen"
    seen.mkdir()
    script = write_script("copy.sh", f"""\
        cp "$1" {seen}/domain.pddl
        cp "$2" {seen}/problem.pddl
    """)
    actions = "(:action noop :parameters () :precondition () :effect ())"
    asyncio.run(ScriptPlugin(script, staging_root).plan(PROBLEM, actions, DOMAIN, timeout=10))

    domain = (seen / "domain.pddl").read_text()
    assert "(:action noop" in domain
    assert domain.rstrip().endswith(")")
    assert (seen / "problem.pddl").read_text() == PROBLEM


def test_missing_executable_fails_without_staging(staging_root, tmp_path):
    plugin = ScriptPlugin(tmp_path / "not-installed-planner", staging_root)
    assert not plugin.is_installed()

    with pytest.raises(PlannerNotFoundError) as info:
        asyncio.run(plugin.plan(PROBLEM, "", DOMAIN, timeout=10))

    assert info.value.kind is ErrorKind.NOT_FOUND
    assert not staging_root.exists()


def test_nonzero_exit_is_abnormal(write_script, staging_root):
    script = write_script("crash.sh", """\
        printf '(pick-up b)\\n' > "$3"
        echo "segmentation fault" >&2
        exit 3
    """)
    with pytest.raises(AbnormalExitError) as info:
        asyncio.run(ScriptPlugin(script, staging_root).plan(PROBLEM, "", DOMAIN, timeout=10))

    assert info.value.exit_code == 3
    assert "segmentation fault" in info.value.message
    _assert_staging_empty(staging_root)


def test_unparsable_output_is_a_parse_failure(write_script, staging_root):
    script = write_script("garbage.sh", """\
        echo "this is not a plan" > "$3"
    """)
    with pytest.raises(PlanParseError):
        asyncio.run(ScriptPlugin(script, staging_root).plan(PROBLEM, "", DOMAIN, timeout=10))
    _assert_staging_empty(staging_root)


def test_timeout_kills_the_planner_and_its_children(write_script, staging_root, tmp_path):
    pid_file = tmp_path / "child.pid"
    script = write_script("slow.sh", f"""\
        printf '(pick-up b)\\n' > "$3"
        sleep 30 &
        echo $! > {pid_file}
        wait
    """)
    plugin = ScriptPlugin(script, staging_root)

    start = time.monotonic()
    with pytest.raises(PlannerTimeoutError) as info:
        asyncio.run(plugin.plan(PROBLEM, "", DOMAIN, timeout=0.5))
    elapsed = time.monotonic() - start

    assert info.value.kind is ErrorKind.TIMED_OUT
    assert elapsed < 10
    _assert_staging_empty(staging_root)

    child = int(pid_file.read_text())
    deadline = time.monotonic() + 5
    while time.monotonic() < deadline:
        try:
            if psutil.Process(child).status() == psutil.STATUS_ZOMBIE:
                break
        except psutil.NoSuchProcess:
            break
        time.sleep(0.05)
    else:
        pytest.fail("child process survived the timeout")


def test_concurrent_invocations_get_separate_staging_areas(write_script, staging_root, tmp_path):
    log = tmp_path / "cwd.log"
    script = write_script("where.sh", f"""\
        pwd >> {log}
        sleep 0.2
        printf '(noop)\\n' > "$3"
    """)
    plugin = ScriptPlugin(script, staging_root)

    async def both():
        return await asyncio.gather(
            plugin.plan(PROBLEM, "", DOMAIN, timeout=10),
            plugin.plan(PROBLEM, "", DOMAIN, timeout=10),
        )

    results = asyncio.run(both())

    assert [len(r) for r in results] == [1, 1]
    cwds = log.read_text().split()
    assert len(cwds) == 2 and cwds[0] != cwds[1]
    assert len(_staging_dirs(staging_root)) == 2
    _assert_staging_empty(staging_root)


def test_cancelled_run_kills_the_planner(write_script, staging_root, tmp_path):
    pid_file = tmp_path / "planner.pid"
    script = write_script("forever.sh", f"""\
        echo $$ > {pid_file}
        exec sleep 30
    """)
    plugin = ScriptPlugin(script, staging_root)

    async def cancel_while_running():
        task = asyncio.create_task(plugin.plan(PROBLEM, "", DOMAIN, timeout=60))
        for _ in range(100):
            if pid_file.exists() and pid_file.read_text().strip():
                break
            await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(cancel_while_running())
    _assert_staging_empty(staging_root)

    pid = int(pid_file.read_text())
    deadline = time.monotonic() + 5
    while time.monotonic() < deadline:
        try:
            if psutil.Process(pid).status() == psutil.STATUS_ZOMBIE:
                break
        except psutil.NoSuchProcess:
            break
        time.sleep(0.05)
    else:
        pytest.fail("planner survived the cancelled run")


def test_unusable_staging_root_is_a_filesystem_error(write_script, tmp_path):
    not_a_dir = tmp_path / "staging-file"
    not_a_dir.write_text("")
    script = write_script("ok.sh", "exit 0\n")

    with pytest.raises(StagingError) as info:
        asyncio.run(ScriptPlugin(script, not_a_dir).plan(PROBLEM, "", DOMAIN, timeout=5))
    assert info.value.kind is ErrorKind.FILESYSTEM
