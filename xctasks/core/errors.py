"""
Errors Module - xctasks 错误类型

所有错误都可以携带一条 hint（修复建议），str() 时附加在消息后面。
"""
from typing import Optional, Sequence


class XcTasksError(Exception):
    """xctasks 错误基类"""

    exit_code = 1

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} {self.hint}"
        return self.message


class ConfigError(XcTasksError):
    """配置文件或环境无效"""


class UnknownTaskError(XcTasksError):
    """请求了未注册的任务"""

    def __init__(self, name: str):
        super().__init__(
            f"Don't know how to build task '{name}'.",
            hint="Run xctasks --list to see available tasks.",
        )
        self.name = name


class TaskCycleError(XcTasksError):
    """任务依赖图中存在环"""

    def __init__(self, path: Sequence[str]):
        super().__init__(f"Circular task dependency: {' => '.join(path)}")
        self.path = list(path)


class StaleDependencyError(XcTasksError):
    """严格模式下依赖缺失或过期"""

    def __init__(self, category, component: str):
        super().__init__(
            f"{component} dependencies missing or outdated.",
            hint="Run xctasks dependencies to install them.",
        )
        self.category = category
        self.component = component


class CommandError(XcTasksError):
    """外部命令以非零状态退出"""

    def __init__(self, args: Sequence[str], returncode: int, message: Optional[str] = None):
        self.args_list = list(args)
        self.returncode = returncode
        super().__init__(
            message or f"Command failed with status ({returncode}): [{' '.join(self.args_list)}]"
        )

    @property
    def exit_code(self) -> int:
        return self.returncode or 1
