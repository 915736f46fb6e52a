"""Shared test fixtures."""

from pathlib import Path
from typing import Dict, List, Optional

import pytest

from xctasks.core.config import BuildConfig, RunOptions
from xctasks.core.errors import CommandError
from xctasks.core.shell import ShellRunner
from xctasks.lib.logger import python_logger, reset_session


@pytest.fixture(autouse=True)
def isolated_logs(tmp_path_factory, monkeypatch):
    """Write log files into a temporary directory."""
    logs_dir = tmp_path_factory.mktemp("logs")
    monkeypatch.setattr(python_logger, "ensure_logs_dir", lambda: logs_dir)
    reset_session()
    yield logs_dir
    reset_session()


class RecordingShell(ShellRunner):
    """ShellRunner that records commands instead of executing them."""

    def __init__(self, cwd: Path, ci: bool = False):
        super().__init__(cwd, env={"PATH": "/usr/bin"}, ci=ci, echo=False)
        self.calls: List[List[str]] = []
        self.failures: Dict[str, int] = {}
        self.probe_results: Dict[str, bool] = {}
        self.executables: Dict[str, str] = {}
        self.captured: Dict[str, str] = {}

    def which(self, command: str) -> Optional[str]:
        return self.executables.get(command)

    def _fail_status(self, args: List[str]) -> int:
        return self.failures.get(" ".join(args), 0)

    def run(self, args, extra_env=None) -> int:
        args = [str(a) for a in args]
        self.calls.append(args)
        status = self._fail_status(args)
        if status:
            raise CommandError(args, status)
        return 0

    def succeeds(self, args) -> bool:
        args = [str(a) for a in args]
        self.calls.append(args)
        return self.probe_results.get(args[0], True)

    def capture(self, args) -> str:
        args = [str(a) for a in args]
        self.calls.append(args)
        return self.captured.get(" ".join(args), "")

    def pipe(self, producer, consumer) -> int:
        producer = [str(a) for a in producer]
        consumer = [str(a) for a in consumer]
        self.calls.append(producer + ["|"] + consumer)
        status = self._fail_status(producer)
        if status:
            raise CommandError(producer, status)
        return 0

    def commands(self) -> List[str]:
        return [" ".join(c) for c in self.calls]


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def shell(project_dir: Path) -> RecordingShell:
    return RecordingShell(project_dir)


def make_config(project_dir: Path, **options) -> BuildConfig:
    config = BuildConfig(project_dir=project_dir, options=RunOptions(**options))
    config.dependencies.secrets_repo = str(project_dir / "no-secrets")
    config.codegen.copiable = ["Networking", "Storage"]
    config.codegen.copiable_config = "CodeGeneration/Sourcery/Copiable/{prefix}-Copiable.sourcery.yaml"
    config.codegen.fakes = ["Networking"]
    config.codegen.fakes_config = "CodeGeneration/Sourcery/Fakes/{prefix}-Fakes.yaml"
    config.mocks_script = "./scripts/start.sh"
    config.clobber = ["vendor", "Pods"]
    return config


def write_pods_state(project_dir: Path, podfile: bytes = b"platform :ios, '15.0'\npod 'Alamofire'\n",
                     recorded: Optional[str] = None, marker: bool = True) -> str:
    """Create Podfile, Podfile.lock and (optionally) Pods/Manifest.lock."""
    import hashlib

    (project_dir / "Podfile").write_bytes(podfile)
    checksum = recorded if recorded is not None else hashlib.sha1(podfile).hexdigest()
    lock = f"PODS:\n  - Alamofire (5.6.0)\n\nPODFILE CHECKSUM: {checksum}\n\nCOCOAPODS: 1.12.1\n"
    (project_dir / "Podfile.lock").write_text(lock)
    if marker:
        (project_dir / "Pods").mkdir(exist_ok=True)
        (project_dir / "Pods" / "Manifest.lock").write_text(lock)
    return checksum
