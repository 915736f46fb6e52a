"""xctasks 任务模块

- TaskGraph / TaskRunner: 任务依赖图与执行
- create_runner: 注册全部项目任务
"""
from .graph import Task, TaskGraph, TaskRunner
from .definitions import BuildContext, ProjectTasks, create_runner, DEFAULT_TASK

__all__ = [
    'Task',
    'TaskGraph',
    'TaskRunner',
    'BuildContext',
    'ProjectTasks',
    'create_runner',
    'DEFAULT_TASK',
]
