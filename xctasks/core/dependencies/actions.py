"""
Repair Actions - 各依赖类别的安装/修复动作

每个动作都调用对应的外部工具；外部命令失败时 CommandError 直接向上抛出。
"""
from typing import Callable, Dict

from ...lib.logger import get_logger
from ..config import BuildConfig
from ..shell import ShellRunner, remove_tree
from .categories import Category


class RepairActions:
    """依赖安装动作"""

    def __init__(self, config: BuildConfig, shell: ShellRunner):
        self.config = config
        self.shell = shell
        self.logger = get_logger("dependencies")
        # SwiftLint 通过 CocoaPods 分发，和 Pods 共用安装动作
        self._actions: Dict[Category, Callable[[], None]] = {
            Category.PACKAGE_MANAGER_RUNTIME: self.install_bundler,
            Category.BUNDLED_PACKAGES: self.install_bundle,
            Category.NATIVE_PACKAGES: self.install_pods,
            Category.LINT_BINARY: self.install_pods,
            Category.CREDENTIALS: self.apply_credentials,
        }

    def repair(self, category: Category):
        self.logger.info(f"Repairing {category.value}")
        self._actions[category]()

    def install_bundler(self):
        print("Bundler not found in PATH, installing to vendor")
        gem_home = self.config.path(self.config.dependencies.gem_home)
        self.shell.set_env("GEM_HOME", str(gem_home))
        self.shell.prepend_path(gem_home / "bin")
        self.logger.debug(f"GEM_HOME={gem_home}")
        if self.shell.which("bundler") is None:
            self.shell.run(["gem", "install", "bundler"])

    def install_bundle(self):
        deps = self.config.dependencies
        with self.shell.fold("install.bundler"):
            self.shell.run([
                "bundle", "install",
                f"--jobs={deps.bundle_jobs}",
                f"--retry={deps.bundle_retry}",
                f"--path={self.config.bundle_path}",
            ])

    def install_pods(self):
        with self.shell.fold("install.cocoapods"):
            self.pod(["install", "--repo-update"])

    def clean_pods(self):
        with self.shell.fold("clean.cocoapods"):
            pods_dir = self.config.path(self.config.dependencies.pods_dir)
            if remove_tree(pods_dir):
                self.logger.info(f"Removed {pods_dir}")

    def apply_credentials(self):
        self.shell.run(
            ["bundle", "exec", "fastlane", "run", "configure_apply", "force:true"],
            extra_env={"FASTLANE_SKIP_UPDATE_CHECK": "1", "FASTLANE_ENV_PRINTER": "1"},
        )

    def pod(self, args):
        self.shell.run(["bundle", "exec", "pod"] + list(args))
