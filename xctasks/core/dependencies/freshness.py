"""
Freshness Module - 各依赖类别的“是否最新”判断

所有判断都是只读的；链路中任何文件缺失都视为“不是最新”，不会抛出异常。
"""
from pathlib import Path
from typing import Callable, Dict

from ...lib.logger import get_logger
from ..checksum import files_byte_equal, manifest_matches_lock
from ..config import BuildConfig
from ..shell import ShellRunner
from .categories import Category


class FreshnessChecker:
    """依赖新鲜度检查器"""

    def __init__(self, config: BuildConfig, shell: ShellRunner):
        self.config = config
        self.shell = shell
        self.logger = get_logger("dependencies")
        self._predicates: Dict[Category, Callable[[], bool]] = {
            Category.PACKAGE_MANAGER_RUNTIME: self.bundler_available,
            Category.BUNDLED_PACKAGES: self.bundle_satisfied,
            Category.NATIVE_PACKAGES: self.pods_installed,
            Category.LINT_BINARY: self.swiftlint_installed,
            Category.CREDENTIALS: self.credentials_applied,
        }

    def is_fresh(self, category: Category) -> bool:
        fresh = self._predicates[category]()
        self.logger.debug(f"Freshness {category.value}: {fresh}")
        return fresh

    def bundler_available(self) -> bool:
        return self.shell.which("bundler") is not None

    def bundle_satisfied(self) -> bool:
        # bundle check 在需要 install 时以非零状态退出
        return self.shell.succeeds(["bundle", "check", f"--path={self.config.bundle_path}"])

    def pods_installed(self) -> bool:
        deps = self.config.dependencies
        podfile_lock = self.config.path(deps.podfile_lock)
        if not manifest_matches_lock(self.config.path(deps.podfile), podfile_lock, deps.checksum_key):
            return False
        return files_byte_equal(podfile_lock, self.config.path(deps.manifest_lock))

    def swiftlint_installed(self) -> bool:
        # 只检查是否存在，不检查版本：SwiftLint 通过 CocoaPods 安装，pod 最新时它也基本是最新的
        return self.config.path(self.config.swiftlint_bin).exists()

    def credentials_required(self) -> bool:
        """本地存在证书仓库或设置了解密密钥时才需要应用证书"""
        secrets_git = Path(self.config.dependencies.secrets_repo).expanduser() / ".git"
        return secrets_git.is_dir() or self.config.options.encryption_key_set

    def credentials_applied(self) -> bool:
        # 证书没有可比较的本地状态：不适用时跳过，适用时由编排器每次运行强制应用
        return True
