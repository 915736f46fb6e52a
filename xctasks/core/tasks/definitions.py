"""
Task Definitions - 项目任务注册

默认任务: test
"""
import os
import time
from typing import Optional

from ...lib.logger import get_logger
from ..config import BuildConfig
from ..dependencies import Category, DependencyOrchestrator, FreshnessChecker, RepairActions
from ..shell import ShellRunner, remove_tree
from ..xcode import PROFILE_SWIFT_FLAGS, XcodeBuild
from .graph import TaskGraph, TaskRunner

DEFAULT_TASK = "test"


class BuildContext:
    """一次运行共享的对象"""

    def __init__(self, config: BuildConfig, shell: Optional[ShellRunner] = None):
        self.config = config
        self.shell = shell or ShellRunner(config.project_dir, ci=config.options.ci)
        self.checker = FreshnessChecker(config, self.shell)
        self.actions = RepairActions(config, self.shell)
        self.orchestrator = DependencyOrchestrator(config, self.checker, self.actions)
        self.xcodebuild = XcodeBuild(config, self.shell)


class ProjectTasks:
    """项目任务实现"""

    def __init__(self, ctx: BuildContext, runner: TaskRunner):
        self.ctx = ctx
        self.runner = runner
        self.config = ctx.config
        self.shell = ctx.shell
        self.logger = get_logger("tasks")

    def register(self, graph: TaskGraph):
        deps = self.ctx.orchestrator
        actions = self.ctx.actions

        # ==================== 依赖 ====================
        graph.add("dependencies", deps=["dependencies:check"],
                  description="Install required dependencies")
        graph.add("dependencies:check", action=deps.run)

        graph.add("dependencies:bundler:check", action=lambda: deps.ensure(Category.PACKAGE_MANAGER_RUNTIME))
        graph.add("dependencies:bundler:install", action=actions.install_bundler)
        graph.add("dependencies:bundle:check", action=lambda: deps.ensure(Category.BUNDLED_PACKAGES))
        graph.add("dependencies:bundle:install", action=actions.install_bundle)
        graph.add("dependencies:pod:check", action=lambda: deps.ensure(Category.NATIVE_PACKAGES))
        graph.add("dependencies:pod:install", action=actions.install_pods)
        graph.add("dependencies:pod:clean", action=actions.clean_pods)
        graph.add("dependencies:lint:check", action=lambda: deps.ensure(Category.LINT_BINARY))
        graph.add("dependencies:credentials:apply", action=self.apply_credentials)

        # ==================== Xcode ====================
        scheme = self.config.xcode.scheme
        graph.add("build", action=self.build, deps=["dependencies"],
                  description=f"Build {scheme}")
        graph.add("buildprofile", action=self.build_profile, deps=["dependencies"],
                  description=f"Profile build {scheme}")
        graph.add("timed_build", action=self.timed_build, deps=["clean"],
                  description=f"Clean, build {scheme} and report CPU and wall time")
        graph.add("test", action=self.test, deps=["dependencies"],
                  description="Run test suite")
        graph.add("clean", action=self.clean,
                  description="Remove any temporary products")
        graph.add("clobber", action=self.clobber, deps=["clean"],
                  description="Remove any generated files")
        graph.add("xcode", action=self.open_xcode, deps=["dependencies"],
                  description="Open the project in Xcode")

        # ==================== Lint / 代码生成 ====================
        graph.add("lint", action=self.lint, deps=["dependencies:lint:check"],
                  description="Checks the source for style errors")
        graph.add("lint:autocorrect", action=self.lint_autocorrect, deps=["dependencies:lint:check"],
                  description="Automatically corrects style errors where possible")
        graph.add("generate", action=self.generate,
                  description="Run all code generation tasks")
        graph.add("mocks", action=self.mocks,
                  description="Start the UI test mock server")

    # ==================== 任务实现 ====================

    def apply_credentials(self):
        if not self.ctx.checker.credentials_required():
            self.logger.debug("No secrets repository or encryption key, skipping credentials")
            return
        self.ctx.actions.apply_credentials()

    def build(self):
        self.ctx.xcodebuild.run(["build"])

    def build_profile(self):
        self.ctx.xcodebuild.run(["build"], [PROFILE_SWIFT_FLAGS], verbose=True)

    def timed_build(self):
        start_times = os.times()
        start_wall = time.perf_counter()
        self.runner.invoke(["build"])
        wall = time.perf_counter() - start_wall
        end_times = os.times()
        cpu = sum(end_times[:4]) - sum(start_times[:4])
        print(f"CPU Time: {cpu}")
        print(f"Wall Time: {wall}")
        self.logger.info(f"Timed build: cpu={cpu:.2f}s wall={wall:.2f}s")

    def test(self):
        self.ctx.xcodebuild.run(["build", "test"])

    def clean(self):
        self.ctx.xcodebuild.run(["clean"])

    def clobber(self):
        for relative in self.config.clobber:
            path = self.config.path(relative)
            if remove_tree(path):
                self.logger.info(f"Clobbered {path}")
                print(f"rm -rf {relative}")

    def open_xcode(self):
        self.shell.run(["open", self.config.xcode.workspace])

    def lint(self):
        self.swiftlint(["lint", "--quiet"])

    def lint_autocorrect(self):
        self.swiftlint(["lint", "--autocorrect", "--quiet"])

    def swiftlint(self, args):
        self.shell.run([str(self.config.path(self.config.swiftlint_bin))] + list(args))

    def generate(self):
        codegen = self.config.codegen

        for prefix in codegen.copiable:
            self._banner(f"Generating Copiable for {prefix}...")
            self._sourcery(codegen.copiable_config.format(prefix=prefix))
        print("\n\nDONE. Generated Copiable for all projects.")

        for prefix in codegen.fakes:
            self._banner(f"Generating Fakes for {prefix}...")
            self._sourcery(codegen.fakes_config.format(prefix=prefix))
        print("\n\nDONE. Generated Fakes.")

    def _banner(self, title: str):
        print(f"\n\n{title}")
        print("=" * 100)

    def _sourcery(self, config_file: str):
        self.shell.run([self.config.codegen.sourcery_bin, "--config", config_file])

    def mocks(self):
        self.shell.run([self.config.mocks_script])


def create_runner(config: BuildConfig, shell: Optional[ShellRunner] = None) -> TaskRunner:
    """创建包含全部项目任务的 TaskRunner"""
    ctx = BuildContext(config, shell)
    graph = TaskGraph(default=DEFAULT_TASK)
    runner = TaskRunner(graph, context=ctx)
    ProjectTasks(ctx, runner).register(graph)
    return runner
