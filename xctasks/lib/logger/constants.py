"""
xctasks Logger Constants

日志模块路径常量定义（内部使用，零依赖）
只使用 Python 标准库，不导入任何业务模块。
"""
from pathlib import Path


# ==================== 全局目录 ====================

# 全局根目录 ~/.xctasks
GLOBAL_DIR = Path.home() / '.xctasks'

# 日志目录 ~/.xctasks/logs/
LOGS_DIR = GLOBAL_DIR / 'logs'


# ==================== 日志格式 ====================

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
LOG_FORMAT_DETAILED = "%(asctime)s [%(levelname)s] [%(name)s:%(funcName)s:%(lineno)d] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


# ==================== 日志配置 ====================

# 日志保留天数
LOG_RETENTION_DAYS = 7

# 环境变量名：设置后日志同时输出到 stderr
ENV_VERBOSE = "XCTASKS_VERBOSE"


def ensure_logs_dir() -> Path:
    """确保日志目录存在"""
    LOGS_DIR.mkdir(parents=True, exist_ok=True)
    return LOGS_DIR
