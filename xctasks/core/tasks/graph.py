"""
Task Graph Module - 具名任务的有向依赖图

节点是具名任务，边表示“依赖于”。请求的任务按拓扑序展开（前置任务在前），
同一次运行中每个任务最多执行一次。
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Set

from ...lib.logger import get_logger, LogContext
from ..errors import TaskCycleError, UnknownTaskError

TaskAction = Callable[[], None]


@dataclass
class Task:
    """具名任务"""
    name: str
    action: Optional[TaskAction] = None
    deps: List[str] = field(default_factory=list)
    description: str = ""


class TaskGraph:
    """任务依赖图"""

    def __init__(self, default: Optional[str] = None):
        self._tasks: Dict[str, Task] = {}
        self.default = default

    def add(self, name: str, action: Optional[TaskAction] = None,
            deps: Iterable[str] = (), description: str = "") -> Task:
        if name in self._tasks:
            raise ValueError(f"Task '{name}' is already defined")
        task = Task(name=name, action=action, deps=list(deps), description=description)
        self._tasks[name] = task
        return task

    def get(self, name: str) -> Task:
        try:
            return self._tasks[name]
        except KeyError:
            raise UnknownTaskError(name)

    def __contains__(self, name: str) -> bool:
        return name in self._tasks

    def names(self) -> List[str]:
        return list(self._tasks)

    def described(self) -> List[Task]:
        """有描述的任务（用于 --list）"""
        return sorted((t for t in self._tasks.values() if t.description), key=lambda t: t.name)

    def resolve(self, names: Iterable[str], done: Optional[Set[str]] = None) -> List[str]:
        """
        把请求的任务展开为执行顺序

        Args:
            names: 请求的任务名（按请求顺序）
            done: 已经执行过的任务，不会再出现在结果中

        Returns:
            拓扑序的任务名列表
        """
        visited: Set[str] = set(done or ())
        order: List[str] = []

        def visit(name: str, path: List[str]):
            if name in path:
                raise TaskCycleError(path[path.index(name):] + [name])
            if name in visited:
                return
            task = self.get(name)
            for dep in task.deps:
                visit(dep, path + [name])
            visited.add(name)
            order.append(name)

        for name in names:
            visit(name, [])
        return order


class TaskRunner:
    """按依赖图执行任务，记录已执行的任务"""

    def __init__(self, graph: TaskGraph, context: Optional[object] = None):
        self.graph = graph
        # 任务共享的运行上下文（BuildContext）
        self.context = context
        self.executed: List[str] = []
        self.logger = get_logger("tasks")

    def invoke(self, names: Iterable[str]) -> int:
        """
        执行任务及其前置任务

        外部命令失败时 CommandError 直接向上抛出，中断整条任务链。

        Returns:
            0
        """
        names = list(names) or [self.graph.default]
        order = self.graph.resolve(names, done=set(self.executed))
        self.logger.debug(f"Execution order: {order}")

        for name in order:
            task = self.graph.get(name)
            self.executed.append(name)
            if task.action is None:
                continue
            with LogContext(self.logger, name):
                task.action()
        return 0
