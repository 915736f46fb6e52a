"""
Shell Module - 外部命令执行封装

所有外部命令都以参数列表的形式执行，不经过 shell 拼接。
ShellRunner 持有本次运行的环境变量副本，安装 bundler 时对 PATH / GEM_HOME 的修改
会作用于之后的所有命令。
"""
import os
import shlex
import shutil
import subprocess
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional, Sequence

from ..lib.logger import get_logger
from .errors import CommandError

# 找不到可执行文件时的退出码（与 shell 一致）
COMMAND_NOT_FOUND = 127


class ShellRunner:
    """外部命令执行器"""

    def __init__(self, cwd: Path, env: Optional[Mapping[str, str]] = None,
                 ci: bool = False, echo: bool = True):
        """
        Args:
            cwd: 命令的工作目录（项目目录）
            env: 初始环境变量，默认复制 os.environ
            ci: 是否输出 travis_fold 标记
            echo: 执行前是否把命令行打印到 stderr
        """
        self.cwd = Path(cwd)
        self.env: Dict[str, str] = dict(os.environ if env is None else env)
        self.ci = ci
        self.echo = echo
        self.logger = get_logger("shell")

    # ==================== 环境 ====================

    def set_env(self, key: str, value: str):
        self.env[key] = value

    def prepend_path(self, directory: Path):
        """把目录加到 PATH 最前面"""
        current = self.env.get("PATH", "")
        self.env["PATH"] = f"{directory}{os.pathsep}{current}" if current else str(directory)

    def which(self, command: str) -> Optional[str]:
        """在当前 PATH 中查找可执行文件"""
        return shutil.which(command, path=self.env.get("PATH"))

    # ==================== 执行 ====================

    def _merged_env(self, extra_env: Optional[Mapping[str, str]]) -> Dict[str, str]:
        if not extra_env:
            return self.env
        merged = dict(self.env)
        merged.update(extra_env)
        return merged

    def _announce(self, args: Sequence[str], extra_env: Optional[Mapping[str, str]] = None):
        line = shlex.join(list(args))
        if extra_env:
            assignments = ' '.join(f"{k}={shlex.quote(v)}" for k, v in extra_env.items())
            line = f"{assignments} {line}"
        self.logger.info(f"Running: {line}")
        if self.echo:
            print(line, file=sys.stderr, flush=True)

    def run(self, args: Sequence[str], extra_env: Optional[Mapping[str, str]] = None) -> int:
        """
        执行命令，非零退出时抛出 CommandError

        Returns:
            命令退出码（总是 0）
        """
        args = [str(a) for a in args]
        self._announce(args, extra_env)
        try:
            result = subprocess.run(args, cwd=str(self.cwd), env=self._merged_env(extra_env))
        except FileNotFoundError:
            self.logger.error(f"Command not found: {args[0]}")
            raise CommandError(args, COMMAND_NOT_FOUND, f"Command not found: {args[0]}")

        self.logger.debug(f"Exit status {result.returncode}: {args[0]}")
        if result.returncode != 0:
            raise CommandError(args, result.returncode)
        return result.returncode

    def succeeds(self, args: Sequence[str]) -> bool:
        """执行命令并丢弃输出，只关心是否成功（不抛异常）"""
        args = [str(a) for a in args]
        self.logger.debug(f"Probing: {shlex.join(args)}")
        try:
            result = subprocess.run(
                args,
                cwd=str(self.cwd),
                env=self.env,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except FileNotFoundError:
            self.logger.debug(f"Command not found: {args[0]}")
            return False
        return result.returncode == 0

    def capture(self, args: Sequence[str]) -> str:
        """执行命令并返回 stdout（去除首尾空白），失败时抛出 CommandError"""
        args = [str(a) for a in args]
        self.logger.debug(f"Capturing: {shlex.join(args)}")
        try:
            result = subprocess.run(
                args,
                cwd=str(self.cwd),
                env=self.env,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError:
            raise CommandError(args, COMMAND_NOT_FOUND, f"Command not found: {args[0]}")

        if result.returncode != 0:
            self.logger.error(f"Capture failed ({result.returncode}): {result.stderr.strip()}")
            raise CommandError(args, result.returncode)
        return result.stdout.strip()

    def pipe(self, producer: Sequence[str], consumer: Sequence[str]) -> int:
        """
        执行 producer | consumer

        consumer 成功时结果为 producer 的退出码，否则为 consumer 的退出码；
        非零时抛出 CommandError。
        """
        producer = [str(a) for a in producer]
        consumer = [str(a) for a in consumer]
        self._announce(producer + ['|'] + consumer)

        try:
            first = subprocess.Popen(producer, cwd=str(self.cwd), env=self.env, stdout=subprocess.PIPE)
        except FileNotFoundError:
            raise CommandError(producer, COMMAND_NOT_FOUND, f"Command not found: {producer[0]}")

        try:
            second = subprocess.Popen(consumer, cwd=str(self.cwd), env=self.env, stdin=first.stdout)
        except FileNotFoundError:
            first.kill()
            first.wait()
            raise CommandError(consumer, COMMAND_NOT_FOUND, f"Command not found: {consumer[0]}")

        # 让 producer 在 consumer 提前退出时收到 SIGPIPE
        first.stdout.close()
        consumer_status = second.wait()
        producer_status = first.wait()
        self.logger.debug(f"Pipe status: producer={producer_status} consumer={consumer_status}")

        if consumer_status != 0:
            raise CommandError(consumer, consumer_status)
        if producer_status != 0:
            raise CommandError(producer, producer_status)
        return 0

    # ==================== CI ====================

    @contextmanager
    def fold(self, label: str) -> Iterator[None]:
        """在 CI 日志中折叠一段输出"""
        if self.ci:
            print(f"travis_fold:start:{label}", flush=True)
        yield
        if self.ci:
            print(f"travis_fold:end:{label}", flush=True)


def remove_tree(path: Path) -> bool:
    """删除目录或文件（rm -rf 语义），返回是否删除了内容"""
    if path.is_symlink() or path.is_file():
        path.unlink()
        return True
    if path.is_dir():
        shutil.rmtree(path)
        return True
    return False
