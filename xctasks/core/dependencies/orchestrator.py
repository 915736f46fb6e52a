"""
Dependency Orchestrator - 依赖检查编排

按固定顺序检查每个依赖类别：
- 正常模式：过期时打印提示并执行一次修复动作，然后继续下一个类别（不重新校验）
- 严格模式：过期时立即抛出 StaleDependencyError，不再检查后续类别，也不做任何修复
- 证书类别不适用时跳过，适用时在两种模式下都强制应用一次

每个类别在一次运行中最多处理一次。
"""
from typing import Iterable, List, Optional, Set

from ...lib.logger import get_logger, LogContext
from ..config import BuildConfig
from ..errors import StaleDependencyError
from .actions import RepairActions
from .categories import CHECK_ORDER, Category
from .freshness import FreshnessChecker


class DependencyOrchestrator:
    """依赖编排器"""

    def __init__(self, config: BuildConfig, checker: FreshnessChecker, actions: RepairActions):
        self.config = config
        self.checker = checker
        self.actions = actions
        self.logger = get_logger("dependencies")
        self._settled: Set[Category] = set()
        self.repaired: List[Category] = []

    @property
    def strict(self) -> bool:
        return self.config.strict

    def run(self, categories: Optional[Iterable[Category]] = None) -> List[Category]:
        """
        检查所有（或指定的）类别

        Returns:
            本次调用中执行了修复动作的类别
        """
        requested = set(categories) if categories is not None else set(CHECK_ORDER)
        repaired = []
        with LogContext(self.logger, "dependencies"):
            for category in CHECK_ORDER:
                if category in requested and self.ensure(category):
                    repaired.append(category)
        return repaired

    def ensure(self, category: Category) -> bool:
        """
        确保单个类别是最新的

        Returns:
            是否执行了修复动作
        """
        if category in self._settled:
            self.logger.debug(f"{category.value} already checked in this run")
            return False

        if self.checker.is_fresh(category):
            self._settled.add(category)
            self._apply_unconditional(category)
            return False

        self.dependency_failed(category)
        self.actions.repair(category)
        self._settled.add(category)
        self.repaired.append(category)
        return True

    def _apply_unconditional(self, category: Category):
        """适用时在两种模式下都执行 configure_apply，不视为过期"""
        if category is Category.CREDENTIALS and self.checker.credentials_required():
            self.logger.info("Applying credentials")
            self.actions.apply_credentials()

    def dependency_failed(self, category: Category):
        """报告依赖过期：严格模式下抛出异常，否则打印提示"""
        if self.strict:
            self.logger.error(f"{category.component} dependencies missing or outdated (strict mode)")
            raise StaleDependencyError(category, category.component)

        msg = f"{category.component} dependencies missing or outdated. Installing..."
        self.logger.info(msg)
        print(msg)
