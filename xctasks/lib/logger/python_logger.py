"""
xctasks Python Logger

日志文件统一存储在 ~/.xctasks/logs/ 目录下，同一次运行共用一个会话时间戳。

Usage:
    from xctasks.lib.logger import get_logger, LogContext

    logger = get_logger('tasks')
    logger.info("Running task: build")

    with LogContext(logger, "dependencies"):
        logger.debug("Checking CocoaPods")
"""
import logging
import os
import sys
from datetime import datetime
from typing import List, Optional

from .constants import (
    LOG_FORMAT,
    LOG_FORMAT_DETAILED,
    DATE_FORMAT,
    LOG_TIMESTAMP_FORMAT,
    ENV_VERBOSE,
    ensure_logs_dir,
)


class XcTasksLogger:
    """xctasks 日志记录器"""

    _instances: dict = {}
    _session_id: Optional[str] = None
    _console_enabled: bool = False

    def __init__(self, name: str, log_file: Optional[str] = None):
        self.name = name
        self.logger = logging.getLogger(f"xctasks.{name}")
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False
        self.log_file: Optional[str] = None
        self._console_handler: Optional[logging.Handler] = None

        # 确保不重复添加 handler
        if not self.logger.handlers:
            self._setup_handlers(log_file)

    def _setup_handlers(self, log_file: Optional[str] = None):
        """设置日志处理器"""
        if log_file is None:
            log_file = self._get_default_log_file()

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT_DETAILED, DATE_FORMAT))
        self.logger.addHandler(file_handler)

        # 控制台处理器 - 通过环境变量或 --verbose 开启
        if os.environ.get(ENV_VERBOSE) or XcTasksLogger._console_enabled:
            self.enable_console()

        self.log_file = log_file

    def _get_default_log_file(self) -> str:
        """获取默认日志文件路径"""
        logs_dir = ensure_logs_dir()

        # 使用会话 ID 确保同一次运行的日志在同一个文件
        if XcTasksLogger._session_id is None:
            XcTasksLogger._session_id = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)

        return str(logs_dir / f"{self.name}_{XcTasksLogger._session_id}.log")

    def enable_console(self):
        """开启 stderr 输出（INFO 及以上）"""
        if self._console_handler is not None:
            return
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        self.logger.addHandler(console_handler)
        self._console_handler = console_handler

    def debug(self, msg: str, *args, **kwargs):
        self.logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        self.logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self.logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self.logger.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        """记录异常信息"""
        self.logger.exception(msg, *args, **kwargs)

    def log_separator(self, title: str = ""):
        """记录分隔线"""
        if title:
            self.info(f"{'=' * 20} {title} {'=' * 20}")
        else:
            self.info("=" * 60)

    def log_dict(self, title: str, data: dict, level: str = "debug"):
        """记录字典数据"""
        log_func = getattr(self, level, self.debug)
        log_func(f"{title}:")
        for key, value in data.items():
            log_func(f"  {key}: {value}")


def get_logger(name: str, log_file: Optional[str] = None) -> XcTasksLogger:
    """
    获取日志记录器（单例模式）

    Args:
        name: 日志记录器名称，如 'tasks', 'dependencies', 'shell'
        log_file: 可选的日志文件路径

    Returns:
        XcTasksLogger 实例
    """
    if name not in XcTasksLogger._instances:
        XcTasksLogger._instances[name] = XcTasksLogger(name, log_file)
    return XcTasksLogger._instances[name]


def enable_console_logging():
    """为已有和之后创建的日志记录器开启 stderr 输出"""
    XcTasksLogger._console_enabled = True
    for instance in XcTasksLogger._instances.values():
        instance.enable_console()


def reset_session():
    """重置会话（用于新的运行）"""
    for instance in XcTasksLogger._instances.values():
        for handler in list(instance.logger.handlers):
            handler.close()
            instance.logger.removeHandler(handler)
    XcTasksLogger._session_id = None
    XcTasksLogger._console_enabled = False
    XcTasksLogger._instances.clear()


# ==================== 便捷函数 ====================

def log_run_start(project_dir: str, tasks: List[str], strict: bool):
    """记录一次任务运行开始"""
    logger = get_logger("tasks")
    logger.log_separator("xctasks Session Start")
    logger.info(f"Project dir: {project_dir}")
    logger.info(f"Requested tasks: {', '.join(tasks)}")
    logger.info(f"Strict mode: {strict}")


def log_run_end(exit_code: int, elapsed: float):
    """记录一次任务运行结束"""
    logger = get_logger("tasks")
    logger.info(f"Run finished in {elapsed:.2f}s with exit code {exit_code}")
    logger.log_separator("xctasks Session End")
