from typing import List

import pytest

from xctasks.core.errors import TaskCycleError, UnknownTaskError
from xctasks.core.tasks import TaskGraph, TaskRunner


def _graph(log: List[str]) -> TaskGraph:
    graph = TaskGraph(default="test")
    graph.add("dependencies", action=lambda: log.append("dependencies"))
    graph.add("clean", action=lambda: log.append("clean"))
    graph.add("build", action=lambda: log.append("build"), deps=["dependencies"])
    graph.add("test", action=lambda: log.append("test"), deps=["dependencies"])
    graph.add("all", deps=["build", "test"], description="Build and test")
    return graph


def test_resolve_puts_prerequisites_first() -> None:
    graph = _graph([])

    assert graph.resolve(["build"]) == ["dependencies", "build"]


def test_shared_prerequisite_runs_once() -> None:
    log: List[str] = []
    runner = TaskRunner(_graph(log))

    runner.invoke(["build", "test"])

    assert log == ["dependencies", "build", "test"]


def test_runner_remembers_executed_tasks_between_invocations() -> None:
    log: List[str] = []
    runner = TaskRunner(_graph(log))

    runner.invoke(["build"])
    runner.invoke(["test"])

    assert log == ["dependencies", "build", "test"]


def test_default_task_used_when_none_requested() -> None:
    log: List[str] = []
    TaskRunner(_graph(log)).invoke([])

    assert log == ["dependencies", "test"]


def test_unknown_task_raises() -> None:
    with pytest.raises(UnknownTaskError) as excinfo:
        _graph([]).resolve(["deploy"])

    assert excinfo.value.name == "deploy"


def test_unknown_dependency_raises() -> None:
    graph = TaskGraph()
    graph.add("build", deps=["missing"])

    with pytest.raises(UnknownTaskError):
        graph.resolve(["build"])


def test_cycle_is_detected() -> None:
    graph = TaskGraph()
    graph.add("a", deps=["b"])
    graph.add("b", deps=["c"])
    graph.add("c", deps=["a"])

    with pytest.raises(TaskCycleError) as excinfo:
        graph.resolve(["a"])

    assert excinfo.value.path == ["a", "b", "c", "a"]


def test_duplicate_task_name_rejected() -> None:
    graph = TaskGraph()
    graph.add("build")

    with pytest.raises(ValueError):
        graph.add("build")


def test_failure_stops_the_chain() -> None:
    log: List[str] = []
    graph = TaskGraph()

    def fail() -> None:
        raise RuntimeError("boom")

    graph.add("dependencies", action=fail)
    graph.add("build", action=lambda: log.append("build"), deps=["dependencies"])

    with pytest.raises(RuntimeError):
        TaskRunner(graph).invoke(["build"])

    assert log == []


def test_described_lists_only_public_tasks() -> None:
    assert [t.name for t in _graph([]).described()] == ["all"]
