"""
xctasks Logger Module

统一日志模块，日志文件存储在 ~/.xctasks/logs/ 目录下。

Available loggers:
    - tasks: 任务调度日志
    - dependencies: 依赖检查与安装日志
    - shell: 外部命令执行日志
    - config: 配置加载日志
    - xcode: Xcode 工程解析日志
"""
from .python_logger import (
    XcTasksLogger,
    get_logger,
    enable_console_logging,
    reset_session,
    log_run_start,
    log_run_end,
)
from .context import LogContext
from .utils import cleanup_old_logs, get_current_log_file
from .constants import LOGS_DIR, GLOBAL_DIR

__all__ = [
    # 核心类和函数
    'XcTasksLogger',
    'get_logger',
    'LogContext',
    'enable_console_logging',
    'reset_session',

    # 便捷函数
    'log_run_start',
    'log_run_end',

    # 工具函数
    'cleanup_old_logs',
    'get_current_log_file',

    # 常量
    'LOGS_DIR',
    'GLOBAL_DIR',
]
