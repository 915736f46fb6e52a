from pathlib import Path

import pytest

from xctasks.core.errors import CommandError, StaleDependencyError
from xctasks.core.tasks import create_runner

from conftest import make_config, write_pods_state

XCODEBUILD = [
    "xcodebuild",
    "-destination", "platform=iOS Simulator,name=iPhone 6s",
    "-sdk", "iphonesimulator",
    "-workspace", "WooCommerce.xcworkspace",
    "-scheme", "WooCommerce",
    "-configuration", "Debug",
]

FORMATTER = ["bundle", "exec", "xcpretty", "-f", "/gems/xcpretty-travis-formatter/lib/formatter.rb"]


@pytest.fixture
def ready_project(project_dir: Path, shell) -> Path:
    """A project whose dependencies are all up to date."""
    shell.executables["bundler"] = "/usr/bin/bundler"
    shell.captured["bundle exec xcpretty-travis-formatter"] = FORMATTER[-1]
    write_pods_state(project_dir)
    binary = project_dir / "Pods" / "SwiftLint" / "swiftlint"
    binary.parent.mkdir(parents=True, exist_ok=True)
    binary.write_text("")
    return project_dir


def test_test_task_pipes_xcodebuild_through_xcpretty(ready_project: Path, shell) -> None:
    create_runner(make_config(ready_project), shell).invoke(["test"])

    assert shell.calls[-1] == XCODEBUILD + ["build", "test", "|"] + FORMATTER


def test_verbose_runs_xcodebuild_directly(ready_project: Path, shell) -> None:
    create_runner(make_config(ready_project, verbose=True), shell).invoke(["build"])

    assert shell.calls[-1] == XCODEBUILD + ["build"]


def test_configuration_override(ready_project: Path, shell) -> None:
    config = make_config(ready_project, verbose=True, configuration_override="Release")
    create_runner(config, shell).invoke(["clean"])

    assert shell.calls[-1][-3:] == ["-configuration", "Release", "clean"]


def test_buildprofile_forces_verbose_and_swift_flags(ready_project: Path, shell) -> None:
    create_runner(make_config(ready_project), shell).invoke(["buildprofile"])

    assert shell.calls[-1] == XCODEBUILD + [
        "build",
        "OTHER_SWIFT_FLAGS=-Xfrontend -debug-time-compilation "
        "-Xfrontend -debug-time-expression-type-checking",
    ]


def test_dependencies_checked_once_for_several_tasks(ready_project: Path, shell) -> None:
    create_runner(make_config(ready_project, verbose=True), shell).invoke(["build", "test", "xcode"])

    assert shell.commands().count("bundle check --path=vendor/bundle") == 1
    assert shell.calls[-1] == ["open", "WooCommerce.xcworkspace"]


def test_strict_mode_stops_before_build(project_dir: Path, shell) -> None:
    runner = create_runner(make_config(project_dir, strict=True), shell)

    with pytest.raises(StaleDependencyError) as excinfo:
        runner.invoke(["build"])

    assert excinfo.value.component == "Bundler"
    assert not any(c[0] == "xcodebuild" for c in shell.calls)


def test_build_failure_propagates_status(ready_project: Path, shell) -> None:
    shell.failures[" ".join(XCODEBUILD + ["build"])] = 65
    runner = create_runner(make_config(ready_project, verbose=True), shell)

    with pytest.raises(CommandError) as excinfo:
        runner.invoke(["build"])

    assert excinfo.value.exit_code == 65


def test_lint_only_requires_swiftlint(project_dir: Path, shell) -> None:
    create_runner(make_config(project_dir), shell).invoke(["lint"])

    swiftlint = str(project_dir / "Pods" / "SwiftLint" / "swiftlint")
    assert shell.calls == [
        ["bundle", "exec", "pod", "install", "--repo-update"],
        [swiftlint, "lint", "--quiet"],
    ]


def test_lint_autocorrect(ready_project: Path, shell) -> None:
    create_runner(make_config(ready_project), shell).invoke(["lint:autocorrect"])

    assert shell.calls[-1][1:] == ["lint", "--autocorrect", "--quiet"]


def test_generate_runs_sourcery_per_prefix(project_dir: Path, shell, capsys) -> None:
    create_runner(make_config(project_dir), shell).invoke(["generate"])

    assert shell.commands() == [
        "./Pods/Sourcery/bin/sourcery --config CodeGeneration/Sourcery/Copiable/Networking-Copiable.sourcery.yaml",
        "./Pods/Sourcery/bin/sourcery --config CodeGeneration/Sourcery/Copiable/Storage-Copiable.sourcery.yaml",
        "./Pods/Sourcery/bin/sourcery --config CodeGeneration/Sourcery/Fakes/Networking-Fakes.yaml",
    ]
    out = capsys.readouterr().out
    assert "Generating Copiable for Storage..." in out
    assert "DONE. Generated Fakes." in out


def test_mocks_has_no_dependency_prerequisite(project_dir: Path, shell) -> None:
    create_runner(make_config(project_dir), shell).invoke(["mocks"])

    assert shell.calls == [["./scripts/start.sh"]]


def test_pod_clean_removes_pods(ready_project: Path, shell) -> None:
    create_runner(make_config(ready_project), shell).invoke(["dependencies:pod:clean"])

    assert not (ready_project / "Pods").exists()


def test_clobber_cleans_then_removes_generated_dirs(ready_project: Path, shell) -> None:
    (ready_project / "vendor" / "bundle").mkdir(parents=True)

    create_runner(make_config(ready_project, verbose=True), shell).invoke(["clobber"])

    assert shell.calls[-1] == XCODEBUILD + ["clean"]
    assert not (ready_project / "vendor").exists()
    assert not (ready_project / "Pods").exists()
    assert (ready_project / "Podfile").exists()


def test_bundler_install_updates_environment(project_dir: Path, shell) -> None:
    create_runner(make_config(project_dir), shell).invoke(["dependencies:bundler:check"])

    gem_home = project_dir / "vendor" / "gems"
    assert shell.env["GEM_HOME"] == str(gem_home)
    assert shell.env["PATH"].split(":")[0] == str(gem_home / "bin")
    assert shell.calls == [["gem", "install", "bundler"]]


def test_credentials_apply_skipped_without_secrets(project_dir: Path, shell) -> None:
    create_runner(make_config(project_dir), shell).invoke(["dependencies:credentials:apply"])

    assert shell.calls == []


def test_credentials_apply_with_encryption_key(project_dir: Path, shell) -> None:
    config = make_config(project_dir, encryption_key_set=True)
    create_runner(config, shell).invoke(["dependencies:credentials:apply"])

    assert shell.calls == [["bundle", "exec", "fastlane", "run", "configure_apply", "force:true"]]


def test_timed_build_reports_times(ready_project: Path, shell, capsys) -> None:
    create_runner(make_config(ready_project, verbose=True), shell).invoke(["timed_build"])

    actions = [c[-1] for c in shell.calls if c[0] == "xcodebuild"]
    assert actions == ["clean", "build"]
    out = capsys.readouterr().out
    assert "CPU Time:" in out
    assert "Wall Time:" in out
