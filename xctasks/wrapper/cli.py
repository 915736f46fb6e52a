#!/usr/bin/env python3
"""
xctasks 命令行入口

Usage:
    xctasks [options] [task ...]

Options:
    --project-dir, -C DIR   项目根目录（默认：当前目录）
    --config, -c PATH       配置文件路径（默认：<project-dir>/.xctasks/config.yaml）
    --dry-run               严格模式：依赖缺失或过期时直接失败，不自动安装
    --check-dependencies    pre-commit hook：严格模式检查全部依赖
    --list, -T              列出可用任务
    --verbose, -v           日志同时输出到 stderr
    --help, -h              显示帮助

默认任务: test
"""
import argparse
import os
import sys
import time
from typing import List, Optional

from ..core.config import ConfigLoader
from ..core.errors import XcTasksError
from ..core.tasks import DEFAULT_TASK, create_runner
from ..lib.logger import (
    cleanup_old_logs,
    enable_console_logging,
    get_current_log_file,
    get_logger,
    log_run_end,
    log_run_start,
)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """解析命令行参数"""
    parser = argparse.ArgumentParser(
        prog="xctasks",
        description="iOS 项目构建任务：依赖检查、xcodebuild、SwiftLint、Sourcery",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "tasks",
        nargs="*",
        help=f"要执行的任务（默认：{DEFAULT_TASK}）",
    )

    parser.add_argument(
        "--project-dir", "-C",
        help="项目根目录",
        default=None,
    )

    parser.add_argument(
        "--config", "-c",
        help="配置文件路径",
        default=None,
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="严格模式：依赖过期时直接失败",
    )

    parser.add_argument(
        "--check-dependencies",
        action="store_true",
        help="严格模式检查全部依赖（用于 git hook）",
    )

    parser.add_argument(
        "--list", "-T",
        action="store_true",
        help="列出可用任务",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="详细输出",
    )

    return parser.parse_args(argv)


def print_tasks(runner):
    tasks = runner.graph.described()
    width = max(len(t.name) for t in tasks)
    for task in tasks:
        print(f"xctasks {task.name.ljust(width)}  # {task.description}")


def check_dependencies_hook(args: argparse.Namespace) -> int:
    """以严格模式检查依赖，过期时打印原因并返回 1"""
    logger = get_logger("tasks")
    project_dir = args.project_dir or os.getcwd()
    try:
        config = ConfigLoader(project_dir, args.config).load(strict=True)
        create_runner(config).invoke(["dependencies"])
    except XcTasksError as e:
        logger.error(f"Dependency check failed: {e}")
        print(str(e))
        return 1
    return 0


def run(args: argparse.Namespace) -> int:
    logger = get_logger("tasks")
    project_dir = args.project_dir or os.getcwd()

    config = ConfigLoader(project_dir, args.config).load(strict=args.dry_run)
    runner = create_runner(config)

    if args.list:
        print_tasks(runner)
        return 0

    tasks = args.tasks or [DEFAULT_TASK]
    log_run_start(str(config.project_dir), tasks, config.strict)
    logger.debug(f"Log file: {get_current_log_file()}")
    start = time.time()
    exit_code = runner.invoke(tasks)
    repaired = runner.context.orchestrator.repaired
    if repaired:
        logger.info(f"Repaired dependencies: {', '.join(c.value for c in repaired)}")
    log_run_end(exit_code, time.time() - start)
    return exit_code


def main(argv: Optional[List[str]] = None):
    """主入口"""
    args = parse_args(argv)
    if args.verbose:
        enable_console_logging()
    logger = get_logger("tasks")
    cleanup_old_logs()

    if args.check_dependencies:
        sys.exit(check_dependencies_hook(args))

    try:
        sys.exit(run(args))
    except XcTasksError as e:
        logger.error(f"Aborted: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
