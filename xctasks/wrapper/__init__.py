"""xctasks 命令行模块"""
from .cli import main, parse_args

__all__ = [
    'main',
    'parse_args',
]
