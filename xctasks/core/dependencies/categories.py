"""
Dependency Categories - 依赖类别（固定、封闭的枚举）

检查顺序即枚举定义顺序。
"""
from enum import Enum
from typing import List


class Category(Enum):
    """依赖类别"""
    PACKAGE_MANAGER_RUNTIME = "bundler"
    BUNDLED_PACKAGES = "bundle"
    NATIVE_PACKAGES = "pod"
    LINT_BINARY = "lint"
    CREDENTIALS = "credentials"

    @property
    def component(self) -> str:
        """面向用户的组件名称"""
        return _COMPONENT_NAMES[self]

    @property
    def task_namespace(self) -> str:
        """对应的任务命名空间，如 dependencies:pod"""
        return f"dependencies:{self.value}"


_COMPONENT_NAMES = {
    Category.PACKAGE_MANAGER_RUNTIME: "Bundler",
    Category.BUNDLED_PACKAGES: "Bundler",
    Category.NATIVE_PACKAGES: "CocoaPods",
    Category.LINT_BINARY: "SwiftLint",
    Category.CREDENTIALS: "Credentials",
}

CHECK_ORDER: List[Category] = list(Category)
