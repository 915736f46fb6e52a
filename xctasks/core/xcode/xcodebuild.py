"""
xcodebuild Module - xcodebuild 命令构建与执行

输出默认通过 `bundle exec xcpretty -f <formatter>` 格式化，verbose 时直接输出。
"""
from typing import List, Sequence

from ...lib.logger import get_logger
from ..config import BuildConfig
from ..shell import ShellRunner
from .workspace import XcodeWorkspace

PROFILE_SWIFT_FLAGS = (
    "OTHER_SWIFT_FLAGS=-Xfrontend -debug-time-compilation "
    "-Xfrontend -debug-time-expression-type-checking"
)


class XcodeBuild:
    """xcodebuild 调用封装"""

    def __init__(self, config: BuildConfig, shell: ShellRunner):
        self.config = config
        self.shell = shell
        self.logger = get_logger("xcode")
        self._configuration_checked = False

    def command(self, actions: Sequence[str], settings: Sequence[str] = ()) -> List[str]:
        """构建 xcodebuild 参数列表"""
        xcode = self.config.xcode
        return [
            "xcodebuild",
            "-destination", xcode.destination,
            "-sdk", xcode.sdk,
            "-workspace", xcode.workspace,
            "-scheme", xcode.scheme,
            "-configuration", self.config.configuration,
        ] + list(actions) + list(settings)

    def formatter_command(self) -> List[str]:
        formatter = self.shell.capture(["bundle", "exec", "xcpretty-travis-formatter"])
        return ["bundle", "exec", "xcpretty", "-f", formatter]

    def check_configuration(self):
        """每次运行只校验一次 configuration"""
        if self._configuration_checked:
            return
        workspace = XcodeWorkspace(self.config.path(self.config.xcode.workspace))
        workspace.validate_configuration(self.config.configuration)
        self._configuration_checked = True

    def run(self, actions: Sequence[str], settings: Sequence[str] = (), verbose: bool = False) -> int:
        self.check_configuration()
        cmd = self.command(actions, settings)
        self.logger.info(f"xcodebuild {' '.join(actions)} ({self.config.configuration})")
        if verbose or self.config.options.verbose:
            return self.shell.run(cmd)
        return self.shell.pipe(cmd, self.formatter_command())
