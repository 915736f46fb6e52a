"""
xctasks Logger Utilities

日志工具函数（清理、查询当前日志文件）
"""
from datetime import datetime
from pathlib import Path
from typing import Optional

from .constants import LOGS_DIR, LOG_RETENTION_DAYS


def cleanup_old_logs(max_days: int = LOG_RETENTION_DAYS, logs_dir: Optional[Path] = None) -> int:
    """清理旧日志文件

    Args:
        max_days: 保留天数，默认 7 天
        logs_dir: 日志目录，默认 ~/.xctasks/logs

    Returns:
        删除的文件数量
    """
    logs_dir = logs_dir or LOGS_DIR
    if not logs_dir.exists():
        return 0

    now = datetime.now()
    deleted_count = 0

    for log_file in logs_dir.glob("*.log"):
        try:
            # 格式: name_YYYYMMDD_HHMMSS.log
            parts = log_file.stem.split('_')
            if len(parts) >= 3:
                file_date = datetime.strptime(parts[-2], "%Y%m%d")
                if (now - file_date).days > max_days:
                    log_file.unlink()
                    deleted_count += 1
        except (ValueError, OSError):
            continue

    return deleted_count


def get_current_log_file(name: str = "tasks") -> Optional[str]:
    """获取当前日志文件路径，未创建时返回 None"""
    # 延迟导入避免循环依赖
    from .python_logger import XcTasksLogger

    if name in XcTasksLogger._instances:
        return XcTasksLogger._instances[name].log_file
    return None
