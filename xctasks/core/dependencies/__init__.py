"""xctasks 依赖模块

主要组件:
- Category: 依赖类别（固定顺序）
- FreshnessChecker: 各类别的新鲜度判断
- RepairActions: 各类别的安装动作
- DependencyOrchestrator: 依赖检查编排
"""
from .categories import Category, CHECK_ORDER
from .freshness import FreshnessChecker
from .actions import RepairActions
from .orchestrator import DependencyOrchestrator

__all__ = [
    'Category',
    'CHECK_ORDER',
    'FreshnessChecker',
    'RepairActions',
    'DependencyOrchestrator',
]
