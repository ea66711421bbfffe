"""
Tests for the fail-fast setup pipeline (core.services.setup_orchestrator).
A fake runner records calls instead of spawning npm.
"""
import sys
from pathlib import Path

import pytest

from core.domain.models import SetupStep
from core.errors import CommandError
from core.services.env_sync import EnvSynchronizer
from core.services.setup_orchestrator import SetupHooks, SetupOrchestrator


class FakeRunner:
    def __init__(self, codes=None):
        self.codes = codes or {}
        self.calls = []

    def __call__(self, command, cwd):
        self.calls.append((list(command), cwd))
        return self.codes.get(command[-1], 0)


def make_steps():
    return [
        SetupStep(description="Installing frontend dependencies", command=["npm", "install", "one"]),
        SetupStep(description="Installing backend dependencies", command=["npm", "install", "two"], cwd=Path("backend")),
        SetupStep(description="Setting up database", command=["npm", "run", "three"], cwd=Path("backend")),
    ]


def make_orchestrator(project_root, runner, identity="192.168.1.50", hooks=None):
    sync = EnvSynchronizer(project_root / ".env", project_root / "env.example")
    return SetupOrchestrator(
        sync,
        identity,
        project_root=project_root,
        runner=runner,
        hooks=hooks,
    )


def test_all_steps_run_in_order(project_root):
    runner = FakeRunner()
    orchestrator = make_orchestrator(project_root, runner)

    assert orchestrator.run(make_steps()) == 0

    assert [call[0][-1] for call in runner.calls] == ["one", "two", "three"]
    assert [call[1] for call in runner.calls] == [project_root, project_root / "backend", project_root / "backend"]
    assert all(outcome.ok for outcome in orchestrator.outcomes)


def test_second_step_failure_stops_the_run(project_root):
    runner = FakeRunner(codes={"two": 2})
    orchestrator = make_orchestrator(project_root, runner)

    with pytest.raises(CommandError) as info:
        orchestrator.run(make_steps())

    assert [call[0][-1] for call in runner.calls] == ["one", "two"]
    assert info.value.description == "Installing backend dependencies"
    assert info.value.returncode == 2
    assert info.value.command == ["npm", "install", "two"]
    assert "Installing backend dependencies" in str(info.value)
    assert [outcome.returncode for outcome in orchestrator.outcomes] == [0, 2]


def test_missing_env_is_created_before_first_step(project_root):
    seen_env = []

    def runner(command, cwd):
        seen_env.append((project_root / ".env").exists())
        return 0

    orchestrator = make_orchestrator(project_root, runner, "10.0.0.9")
    orchestrator.run(make_steps())

    assert seen_env == [True, True, True]
    assert "FRONTEND_URL=http://10.0.0.9:5173" in (project_root / ".env").read_text(encoding="utf-8")


def test_existing_env_is_not_touched(project_root):
    env = project_root / ".env"
    env.write_text("FRONTEND_URL=http://old:5173\n", encoding="utf-8")
    orchestrator = make_orchestrator(project_root, FakeRunner(), "10.0.0.9")

    orchestrator.run(make_steps())

    assert env.read_text(encoding="utf-8") == "FRONTEND_URL=http://old:5173\n"


def test_hooks_announce_progress(project_root):
    events = []
    hooks = SetupHooks(
        env_exists=lambda path: events.append(("exists", path.name)),
        env_created=lambda result: events.append(("created", result.host)),
        step_start=lambda step: events.append(("start", step.description)),
        step_success=lambda step: events.append(("ok", step.description)),
        step_failure=lambda step, code: events.append(("fail", step.description, code)),
    )
    orchestrator = make_orchestrator(project_root, FakeRunner(codes={"two": 1}), hooks=hooks)

    with pytest.raises(CommandError):
        orchestrator.run(make_steps())

    assert events == [
        ("created", "192.168.1.50"),
        ("start", "Installing frontend dependencies"),
        ("ok", "Installing frontend dependencies"),
        ("start", "Installing backend dependencies"),
        ("fail", "Installing backend dependencies", 1),
    ]


def test_empty_step_list_only_ensures_env(project_root):
    orchestrator = make_orchestrator(project_root, FakeRunner())
    assert orchestrator.run([]) == 0
    assert (project_root / ".env").exists()


def test_real_processes_fail_fast(project_root):
    marker = project_root / "third-ran"
    steps = [
        SetupStep(description="ok", command=[sys.executable, "-c", "pass"]),
        SetupStep(description="boom", command=[sys.executable, "-c", "import sys; sys.exit(3)"]),
        SetupStep(description="never", command=[sys.executable, "-c", f"open({str(marker)!r}, 'w').close()"]),
    ]
    sync = EnvSynchronizer(project_root / ".env", project_root / "env.example")
    orchestrator = SetupOrchestrator(sync, "192.168.1.50", project_root=project_root)

    with pytest.raises(CommandError) as info:
        orchestrator.run(steps)

    assert info.value.description == "boom"
    assert info.value.returncode == 3
    assert not marker.exists()
